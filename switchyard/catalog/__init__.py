"""
Switchyard shipped command catalog.

Layout (see switchyard.loader)
- commands/<word>.py                         one-word commands
- <group>/commands/<group>-<word>.py         two-word commands
- <group>/commands/<sub>/<sub>-<...>.py      three or more words

Every command module exports `command`, an instance of switchyard.Command.
Shared bases for remote commands live in switchyard.catalog.base.
"""

import os

from switchyard import Command
from switchyard.commands import Registry
from switchyard.loader import Loader

# <root>/cli/commands/completion/completion-list.py
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir, os.pardir))


class CliCompletionListCommand(Command):
    name = "cli completion list"
    description = "Lists every command with its options for shell completion"

    async def action(self, invocation, context):
        registry = Registry()
        Loader(registry, ROOT).load_all()

        entries = []
        for info in sorted(registry, key=lambda info: info.name):
            for name in info.names:
                entries.append({
                    "name": name,
                    "options": [spelling for option in info.options for spelling in option.flags.split(", ")],
                    "autocomplete": {option.name: list(option.autocomplete) for option in info.options if option.autocomplete},
                })
        context.log(entries)


command = CliCompletionListCommand()

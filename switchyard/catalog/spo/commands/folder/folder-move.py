from switchyard.catalog.base import CopyJobCommand


class SpoFolderMoveCommand(CopyJobCommand):
    name = "spo folder move"
    description = "Moves a folder to another location"
    move = True


command = SpoFolderMoveCommand()

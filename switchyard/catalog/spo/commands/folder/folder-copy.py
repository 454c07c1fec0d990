from switchyard.catalog.base import CopyJobCommand


class SpoFolderCopyCommand(CopyJobCommand):
    name = "spo folder copy"
    description = "Copies a folder to another location"


command = SpoFolderCopyCommand()

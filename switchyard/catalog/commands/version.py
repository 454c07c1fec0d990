from switchyard import Command, __version__


class VersionCommand(Command):
    name = "version"
    description = "Shows the switchyard version"

    async def action(self, invocation, context):
        context.log(f"v{__version__}")


command = VersionCommand()

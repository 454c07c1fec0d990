from switchyard import Declaration
from switchyard.catalog.base import GraphCommand


class TodoListSetCommand(GraphCommand):
    name = "todo list set"
    description = "Updates a Microsoft To Do task list"

    def options(self):
        return [
            Declaration("-i, --id <id>", "The ID of the list to update"),
            Declaration("--newName <newName>", "The new name for the task list"),
        ] + super().options()

    def types(self):
        return {"string": ["id", "newName"]}

    def validate(self):
        def validator(invocation):
            if not invocation.get("id"):
                return "Required option id is missing"
            if not invocation.get("newName"):
                return "Required option newName is missing"
            return True
        return validator

    async def action(self, invocation, context):
        await self.request(
            "PATCH",
            f"{self.resource}/beta/me/todo/lists/{invocation['id']}",
            json={"displayName": invocation["newName"]},
        )
        if invocation.get("verbose"):
            context.log("DONE")


command = TodoListSetCommand()

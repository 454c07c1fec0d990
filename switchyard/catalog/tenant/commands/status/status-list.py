from switchyard.catalog.base import SpoCommand

SERVICE_URL = "https://manage.office.com/api/v1.0"


class TenantStatusListCommand(SpoCommand):
    name = "tenant status list"
    description = "Gets health status of the different services in Microsoft 365"

    async def action(self, invocation, context):
        if invocation.get("verbose"):
            context.log("Getting the health status of the different services in Microsoft 365.")

        tenant = self.spo_url().removeprefix("https://")
        response = await self.request("GET", f"{SERVICE_URL}/{tenant}/ServiceComms/CurrentStatus")
        payload = response.json()

        if invocation.get("output") == "json":
            context.log(payload)
        else:
            context.log([
                {"Name": service.get("WorkloadDisplayName"), "Status": service.get("StatusDisplayName")}
                for service in payload.get("value", [])
            ])

        if invocation.get("verbose"):
            context.log("DONE")


command = TenantStatusListCommand()

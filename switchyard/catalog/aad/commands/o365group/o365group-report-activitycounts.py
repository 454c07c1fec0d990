from switchyard.catalog.base import PeriodBasedReport


class AadO365GroupReportActivityCountsCommand(PeriodBasedReport):
    name = "aad o365group report activitycounts"
    description = "Get the number of group activities across group workloads"
    usage_endpoint = "getOffice365GroupsActivityCounts"

    def aliases(self):
        return ["aad o365group report activity"]


command = AadO365GroupReportActivityCountsCommand()

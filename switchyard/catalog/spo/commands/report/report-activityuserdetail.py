from switchyard.catalog.base import DateAndPeriodBasedReport


class SpoReportActivityUserDetailCommand(DateAndPeriodBasedReport):
    name = "spo report activityuserdetail"
    description = "Gets details about SharePoint activity by user"
    usage_endpoint = "getSharePointActivityUserDetail"


command = SpoReportActivityUserDetailCommand()

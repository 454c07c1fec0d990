from switchyard.catalog.base import DateAndPeriodBasedReport


class TenantReportActiveUserDetailCommand(DateAndPeriodBasedReport):
    name = "tenant report activeuserdetail"
    description = "Gets details about Microsoft 365 active users"
    usage_endpoint = "getOffice365ActiveUserDetail"


command = TenantReportActiveUserDetailCommand()

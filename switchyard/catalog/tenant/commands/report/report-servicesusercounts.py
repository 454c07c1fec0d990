from switchyard.catalog.base import PeriodBasedReport


class TenantReportServicesUserCountsCommand(PeriodBasedReport):
    name = "tenant report servicesusercounts"
    description = "Gets the count of users by activity type and service"
    usage_endpoint = "getOffice365ServicesUserCounts"


command = TenantReportServicesUserCountsCommand()

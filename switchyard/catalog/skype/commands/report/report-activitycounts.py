from switchyard.catalog.base import PeriodBasedReport


class SkypeReportActivityCountsCommand(PeriodBasedReport):
    name = "skype report activitycounts"
    description = "Gets the trends on how many users organized and participated in conference sessions held in your organization through Skype for Business"
    usage_endpoint = "getSkypeForBusinessActivityCounts"


command = SkypeReportActivityCountsCommand()

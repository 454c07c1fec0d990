from switchyard.catalog.base import PeriodBasedReport


class SpoReportActivityFileCountsCommand(PeriodBasedReport):
    name = "spo report activityfilecounts"
    description = "Gets the number of unique, licensed users who interacted with files stored on SharePoint sites"
    usage_endpoint = "getSharePointActivityFileCounts"


command = SpoReportActivityFileCountsCommand()

from switchyard.catalog.base import PeriodBasedReport


class OutlookReportMailActivityCountsCommand(PeriodBasedReport):
    name = "outlook report mailactivitycounts"
    description = "Enables you to understand the trends of email activity (like how many were sent, read, and received) in your organization"
    usage_endpoint = "getEmailActivityCounts"


command = OutlookReportMailActivityCountsCommand()

"""
Bases shared by the shipped remote commands.

Overview
- RemoteCommand
  • HTTP through a requests.Session run in a worker thread (await self.request()).
  • Failed calls surface as CommandError carrying the remote error message.
- GraphCommand / SpoCommand
  • Resource roots: SWITCHYARD_GRAPH_URL (default https://graph.microsoft.com)
    and SWITCHYARD_SPO_URL (the SharePoint tenant root).
- PeriodBasedReport / DateAndPeriodBasedReport
  • Graph usage reports returned as CSV; logged as rows, or written verbatim to
    --outputFile.

Environment
- SWITCHYARD_ACCESS_TOKEN, when set, is sent as a bearer token. Acquiring the
  token is outside the scope of this package.
"""
import asyncio
import csv
import io
import json
import os
import re
import urllib.parse
from abc import abstractmethod

import requests

from switchyard import Command, CommandError, Declaration
from switchyard.polling import JobFailedError, poll

PERIODS = ("D7", "D30", "D90", "D180")


def _message(error, /):
    """
    Internal: best human message for a failed request.
    """
    response = getattr(error, "response", None)
    if response is not None:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            if isinstance(odata := payload.get("odata.error"), dict):
                if value := (odata.get("message") or {}).get("value"):
                    return value
            if isinstance(nested := payload.get("error"), dict) and nested.get("message"):
                return nested["message"]
            if isinstance(payload.get("message"), str):
                return payload["message"]
        if text := getattr(response, "text", ""):
            return text
    return str(error)


class RemoteCommand(Command):
    """
    Command talking to a remote HTTP API.
    """
    timeout = 60

    def session(self):
        session = requests.Session()
        session.headers["accept"] = "application/json;odata.metadata=none"
        if token := os.environ.get("SWITCHYARD_ACCESS_TOKEN"):
            session.headers["authorization"] = f"Bearer {token}"
        return session

    async def request(self, method, url, /, **kwargs):
        """
        Perform one HTTP call and return the requests.Response.

        Raises
        - CommandError when the call fails or answers with an error status.
        """

        def send():
            with self.session() as session:
                response = session.request(method, url, timeout=self.timeout, **kwargs)
                response.raise_for_status()
                return response

        try:
            return await asyncio.to_thread(send)
        except requests.RequestException as error:
            raise CommandError(_message(error)) from error


class GraphCommand(RemoteCommand):

    @property
    def resource(self):
        return os.environ.get("SWITCHYARD_GRAPH_URL", "https://graph.microsoft.com").rstrip("/")


class SpoCommand(RemoteCommand):

    @staticmethod
    def spo_url():
        """
        SharePoint tenant root, e.g. https://contoso.sharepoint.com.

        Raises
        - CommandError when SWITCHYARD_SPO_URL is not set.
        """
        if not (url := os.environ.get("SWITCHYARD_SPO_URL")):
            raise CommandError("SharePoint URL unknown; set SWITCHYARD_SPO_URL to the tenant root")
        return url.rstrip("/")

    @staticmethod
    def is_valid_sharepoint_url(url, /):
        """
        Return True, or the message explaining why url is not a site URL.
        """
        if not url:
            return "site URL is empty"
        if not str(url).startswith("https://"):
            return f"{url} is not a valid SharePoint Online site URL"
        return True

    @staticmethod
    def url_combine(base, relative, /):
        return "/".join(part.strip("/") for part in (base, relative) if part.strip("/"))

    @staticmethod
    def tenant_url(url, /):
        parsed = urllib.parse.urlsplit(url)
        return f"{parsed.scheme}://{parsed.hostname}"


class CopyJobCommand(SpoCommand):
    """
    SharePoint copy (or move) job: CreateCopyJobs, then poll GetCopyJobProgress.

    The job fails immediately on a JobError/JobFatalError log entry; progress
    checks that fail are retried `poll_retries` times in a row.
    """
    move = False
    poll_attempts = 1800
    poll_interval = 1.0
    poll_retries = 5

    def options(self):
        verb = "move" if self.move else "copy"
        return [
            Declaration("-u, --webUrl <webUrl>", "The URL of the site where the folder is located"),
            Declaration("-s, --sourceUrl <sourceUrl>", f"Site-relative URL of the folder to {verb}"),
            Declaration("-t, --targetUrl <targetUrl>", f"Server-relative URL where to {verb} the folder"),
            Declaration("--allowSchemaMismatch", f"Ignores any missing fields in the target document library and {verb}s the folder anyway"),
        ] + super().options()

    def types(self):
        return {"string": ["webUrl", "sourceUrl", "targetUrl"], "boolean": ["allowSchemaMismatch"]}

    def validate(self):
        return lambda invocation: self.is_valid_sharepoint_url(invocation.get("webUrl"))

    async def action(self, invocation, context):
        web = invocation["webUrl"]
        options = {"AllowSchemaMismatch": bool(invocation.get("allowSchemaMismatch")), "IgnoreVersionHistory": True}
        if self.move:
            options["IsMoveMode"] = True

        response = await self.request(
            "POST",
            self.url_combine(web, "/_api/site/CreateCopyJobs"),
            headers={"accept": "application/json;odata=nometadata"},
            json={
                "exportObjectUris": [self.url_combine(web, invocation["sourceUrl"])],
                "destinationUri": self.url_combine(self.tenant_url(web), invocation["targetUrl"]),
                "options": options,
            },
        )
        job = response.json()["value"][0]

        async def check(count):
            progress = (await self.request(
                "POST",
                self.url_combine(web, "/_api/site/GetCopyJobProgress"),
                headers={"accept": "application/json;odata=nometadata"},
                json={"copyJobInfo": job},
            )).json()

            if invocation.get("debug"):
                context.log("copy job progress response...")
                context.log(progress)
            if invocation.get("verbose"):
                state = progress.get("JobState")
                context.log(f"Check #{count}. Copy job in progress... JobState: {state}" if state == 4 else f"Check #{count}. JobState: {state}")

            for entry in progress.get("Logs") or ():
                if (log := json.loads(entry)).get("Event") in ("JobError", "JobFatalError"):
                    raise JobFailedError(log.get("Message") or log["Event"])

            return progress.get("JobState") == 0

        await poll(check, attempts=self.poll_attempts, interval=self.poll_interval, retries=self.poll_retries)

        if invocation.get("verbose"):
            context.log("DONE")


class PeriodBasedReport(GraphCommand):
    """
    Graph usage report for a period (D7, D30, D90 or D180).

    Subclasses set `usage_endpoint`, the report function name.
    """

    @property
    @abstractmethod
    def usage_endpoint(self):
        """
        Report function, e.g. "getSkypeForBusinessActivityCounts".
        """

    def options(self):
        return [
            Declaration("-p, --period <period>", "The length of time over which the report is aggregated. Supported values D7|D30|D90|D180", PERIODS),
            Declaration("-f, --outputFile [outputFile]", "Path to the file where the report should be stored in"),
        ] + super().options()

    def types(self):
        return {"string": ["period", "outputFile"]}

    def validate(self):
        def validator(invocation):
            if invocation.get("period") not in PERIODS:
                return f"{invocation.get('period')} is not a valid period type. The supported values are {'|'.join(PERIODS)}"
            return self.validate_output_file(invocation)
        return validator

    @staticmethod
    def validate_output_file(invocation, /):
        if (path := invocation.get("outputFile")) and not os.path.isdir(os.path.dirname(os.path.abspath(path))):
            return f"The specified path {os.path.dirname(path)} doesn't exist"
        return True

    def endpoint(self, invocation, /):
        return f"{self.resource}/v1.0/reports/{self.usage_endpoint}(period='{urllib.parse.quote(invocation['period'])}')"

    async def action(self, invocation, context):
        response = await self.request("GET", self.endpoint(invocation))
        content = self.clean(response.text)

        if path := invocation.get("outputFile"):
            with open(path, "w", encoding="utf-8") as file:
                file.write(content)
            if invocation.get("verbose"):
                context.log(f"File saved to path '{path}'")
            return

        if invocation.get("output") == "json":
            context.log(self.rows(content))
        else:
            context.log(content)

    @staticmethod
    def clean(content, /):
        """
        Drop blank lines and a leading byte order mark from a CSV report.
        """
        return "\n".join(line for line in content.lstrip("\ufeff").splitlines() if line.strip())

    @staticmethod
    def rows(content, /):
        """
        Parse a CSV report into one mapping per data row.
        """
        return [dict(row) for row in csv.DictReader(io.StringIO(content))]


class DateAndPeriodBasedReport(PeriodBasedReport):
    """
    Graph usage report for either a period or a single day (YYYY-MM-DD).
    """

    def options(self):
        return [
            Declaration("-p, --period [period]", "The length of time over which the report is aggregated. Supported values D7|D30|D90|D180", PERIODS),
            Declaration("-d, --date [date]", "The date for which you would like to view the users who performed any activity. Supported date format is YYYY-MM-DD. Specify the date or period, but not both."),
            Declaration("-f, --outputFile [outputFile]", "Path to the file where the report should be stored in"),
        ] + super(PeriodBasedReport, self).options()

    def types(self):
        return {"string": ["period", "date", "outputFile"]}

    def validate(self):
        def validator(invocation):
            period, date = invocation.get("period"), invocation.get("date")
            if not period and not date:
                return "Specify period or date, one is required."
            if period and date:
                return "Specify period or date but not both."
            if date and not self.is_valid_date(date):
                return f"{date} is not a valid date. The supported date format is YYYY-MM-DD"
            if period and period not in PERIODS:
                return f"{period} is not a valid period type. The supported values are {'|'.join(PERIODS)}"
            return self.validate_output_file(invocation)
        return validator

    @staticmethod
    def is_valid_date(value, /):
        return bool(re.fullmatch(r"\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])", str(value)))

    def endpoint(self, invocation, /):
        if period := invocation.get("period"):
            selector = f"period='{urllib.parse.quote(period)}'"
        else:
            selector = f"date={urllib.parse.quote(invocation['date'])}"
        return f"{self.resource}/v1.0/reports/{self.usage_endpoint}({selector})"


__all__ = (
    "PERIODS",
    "RemoteCommand",
    "GraphCommand",
    "SpoCommand",
    "CopyJobCommand",
    "PeriodBasedReport",
    "DateAndPeriodBasedReport",
)

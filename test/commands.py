"""
Command layer and shipped catalog tests (descriptors, registry, catalog commands).

Scope
- Validate CommandInfo normalization (name, aliases, options, alias table).
- Validate the Registry lifecycle (register, find by alias, seal).
- Validate that every shipped command resolves through the fast path.
- Validate the shipped commands against stubbed remote calls: reports, folder
  copy and move jobs, tenant status, to-do lists, version and completion.

Conventions
- Test method names follow CamelCase per project convention.
- Remote calls are stubbed by patching requests.Session.request.
- Copy-job polling runs without delay (poll_interval patched to 0).
"""

from __future__ import annotations

import io
import json
import os
import shutil
import tempfile
import unittest
from unittest import TestCase, mock

import requests
from rich.console import Console

import switchyard
from switchyard import Cli, Command, CommandInfo, Declaration, Registry
from switchyard.catalog.base import CopyJobCommand, DateAndPeriodBasedReport, PeriodBasedReport
from switchyard.cli import CATALOG
from switchyard.loader import Loader

SHIPPED = (
    "version",
    "cli completion list",
    "aad o365group report activitycounts",
    "outlook report mailactivitycounts",
    "skype report activitycounts",
    "spo folder copy",
    "spo folder move",
    "spo report activityfilecounts",
    "spo report activityuserdetail",
    "tenant report activeuserdetail",
    "tenant report servicesusercounts",
    "tenant status list",
    "todo list set",
)

PING = """
from switchyard import Command


class PingCommand(Command):
    name = "ping"
    description = "Answers pong"

    async def action(self, invocation, context):
        context.log("pong")


command = PingCommand()
"""


class Sample(Command):
    name = "spo site list"
    description = "Lists sites"

    def aliases(self):
        return ["spo sites", "  "]

    def options(self):
        return [Declaration("-t, --type [type]", "Site type", ("TeamSite", "CommunicationSite"))] + super().options()

    async def action(self, invocation, context):
        pass


def response(payload=None, text=""):
    stub = mock.Mock(spec=requests.Response)
    stub.text = text
    stub.json.return_value = payload
    stub.raise_for_status.return_value = None
    return stub


class TestCommandInfo(TestCase):
    """Behavioral tests for CommandInfo."""

    def setUp(self):
        self.info = CommandInfo(Sample())

    def testNamesIncludeAliases(self):
        self.assertEqual(self.info.names, ("spo site list", "spo sites"))

    def testGlobalOptionsFollowCommandOptions(self):
        self.assertEqual([option.name for option in self.info.options], ["type", "query", "output", "verbose", "debug"])

    def testAliasingMapsShortToLong(self):
        self.assertEqual(self.info.aliasing(), {"t": "type", "o": "output"})

    def testOptionLookup(self):
        self.assertEqual(self.info.option("o").name, "output")
        with self.assertRaises(KeyError):
            self.info.option("missing")

    def testRejectsNonCommand(self):
        with self.assertRaises(TypeError):
            CommandInfo(object())

    def testRejectsBlankName(self):
        class Blank(Sample):
            name = "  "

        with self.assertRaises(ValueError):
            CommandInfo(Blank())


class TestRegistry(TestCase):
    """Behavioral tests for Registry."""

    def testFindByNameOrAlias(self):
        registry = Registry()
        info = registry.register(Sample())
        self.assertIs(registry.find("spo site list"), info)
        self.assertIs(registry.find("spo sites"), info)
        self.assertIsNone(registry.find("spo site"))

    def testSealedRegistryRejectsCommands(self):
        registry = Registry()
        registry.register(Sample())
        self.assertTrue(registry.seal().sealed)
        with self.assertRaises(RuntimeError):
            registry.register(Sample())
        self.assertEqual(len(registry), 1)

    def testEmptyRegistryIsFalsy(self):
        self.assertFalse(Registry())


class TestCatalog(TestCase):
    """Resolution of the shipped catalog."""

    def testFullDiscoveryFindsEveryCommand(self):
        registry = Registry()
        Loader(registry, CATALOG).load_all()
        self.assertEqual(sorted(info.name for info in registry), sorted(SHIPPED))

    def testEveryCommandResolvesThroughFastPath(self):
        for name in SHIPPED:
            if "completion" in name.split():
                continue
            with self.subTest(name=name):
                registry = Registry()
                self.assertEqual(Loader(registry, CATALOG).load(name.split()), name)
                self.assertEqual(len(registry), 1)
                self.assertIsNotNone(registry.find(name))

    def testGroupAliasResolvesAfterDiscovery(self):
        registry = Registry()
        Loader(registry, CATALOG).load(["aad", "o365group", "report", "activity"])
        self.assertEqual(registry.find("aad o365group report activity").name, "aad o365group report activitycounts")


class TestReports(TestCase):
    """Report validators and endpoints."""

    class Counts(PeriodBasedReport):
        name = "tenant report counts"
        description = "Counts"
        usage_endpoint = "getCounts"

    class Detail(DateAndPeriodBasedReport):
        name = "tenant report detail"
        description = "Detail"
        usage_endpoint = "getDetail"

    def testPeriodValidator(self):
        validator = self.Counts().validate()
        self.assertIs(validator({"period": "D90"}), True)
        self.assertIn("not a valid period type", validator({"period": "D9"}))

    def testOutputFileDirectoryMustExist(self):
        validator = self.Counts().validate()
        message = validator({"period": "D7", "outputFile": os.path.join("missing-directory", "nested", "report.csv")})
        self.assertIn("doesn't exist", message)

    def testDateOrPeriodRequired(self):
        validator = self.Detail().validate()
        self.assertEqual(validator({}), "Specify period or date, one is required.")
        self.assertEqual(validator({"period": "D7", "date": "2024-01-01"}), "Specify period or date but not both.")
        self.assertIn("is not a valid date", validator({"date": "2024-13-01"}))
        self.assertIs(validator({"date": "2024-02-29"}), True)

    def testEndpoints(self):
        with mock.patch.dict(os.environ, {"SWITCHYARD_GRAPH_URL": "https://graph.example/"}):
            self.assertEqual(self.Counts().endpoint({"period": "D7"}), "https://graph.example/v1.0/reports/getCounts(period='D7')")
            self.assertEqual(self.Detail().endpoint({"date": "2024-02-29"}), "https://graph.example/v1.0/reports/getDetail(date=2024-02-29)")

    def testCleanDropsBlankLinesAndByteOrderMark(self):
        self.assertEqual(PeriodBasedReport.clean("\ufeffA,B\r\n\r\n1,2\r\n"), "A,B\n1,2")

    def testReportWrittenToOutputFile(self):
        directory = self.enterContext(tempfile.TemporaryDirectory())
        path = os.path.join(directory, "report.csv")
        stdout = Console(file=io.StringIO(), color_system=None)
        cli = Cli(shell=False, stdout=stdout, stderr=Console(file=io.StringIO(), color_system=None), colorful=False)
        with mock.patch.object(requests.Session, "request", return_value=response(text="A,B\n1,2\n")):
            code = cli.execute(["tenant", "report", "servicesusercounts", "--period", "D30", "--outputFile", path, "--verbose"])
        self.assertEqual(code, 0)
        with open(path, encoding="utf-8") as file:
            self.assertEqual(file.read(), "A,B\n1,2")
        self.assertIn("File saved to path", stdout.file.getvalue())


class TestShippedCommands(TestCase):
    """Shipped commands run end to end against stubbed remote calls."""

    def setUp(self):
        self.stdout = Console(file=io.StringIO(), color_system=None, width=200)
        self.stderr = Console(file=io.StringIO(), color_system=None, width=200)

    def execute(self, *argv):
        return Cli(shell=False, stdout=self.stdout, stderr=self.stderr, colorful=False).execute(list(argv))

    def testVersion(self):
        self.assertEqual(self.execute("version"), 0)
        self.assertEqual(self.stdout.file.getvalue(), f"v{switchyard.__version__}\n")

    def testCompletionListsEveryName(self):
        self.assertEqual(self.execute("cli", "completion", "list", "--output", "json"), 0)
        entries = {entry["name"]: entry for entry in json.loads(self.stdout.file.getvalue())}
        self.assertIn("aad o365group report activity", entries)
        self.assertTrue(set(SHIPPED) <= set(entries))
        self.assertIn("--webUrl", entries["spo folder copy"]["options"])
        self.assertEqual(entries["version"]["autocomplete"], {"output": ["json", "text"]})

    def testCompletionListsItsOwnCatalog(self):
        root = self.enterContext(tempfile.TemporaryDirectory())
        target = os.path.join(root, "cli", "commands", "completion")
        os.makedirs(target)
        shutil.copy(os.path.join(CATALOG, "cli", "commands", "completion", "completion-list.py"), target)
        os.makedirs(os.path.join(root, "commands"))
        with open(os.path.join(root, "commands", "ping.py"), "w", encoding="utf-8") as file:
            file.write(PING)

        cli = Cli(root, shell=False, stdout=self.stdout, stderr=self.stderr, colorful=False)
        self.assertEqual(cli.execute(["cli", "completion", "list", "-o", "json"]), 0)
        names = [entry["name"] for entry in json.loads(self.stdout.file.getvalue())]
        self.assertEqual(names, ["cli completion list", "ping"])

    def testFolderCopyPollsUntilDone(self):
        replies = [
            response({"value": [{"JobId": "42"}]}),
            response({"JobState": 4, "Logs": []}),
            response({"JobState": 0, "Logs": []}),
        ]
        with mock.patch.object(CopyJobCommand, "poll_interval", 0), \
                mock.patch.object(requests.Session, "request", side_effect=replies) as request:
            code = self.execute(
                "spo", "folder", "copy",
                "--webUrl", "https://contoso.sharepoint.com/sites/team",
                "--sourceUrl", "Shared Documents/Reports",
                "--targetUrl", "/sites/archive/Shared Documents",
            )
        self.assertEqual(code, 0)
        self.assertEqual(request.call_count, 3)
        method, url = request.call_args_list[0].args
        self.assertEqual((method, url), ("POST", "https://contoso.sharepoint.com/sites/team/_api/site/CreateCopyJobs"))
        body = request.call_args_list[0].kwargs["json"]
        self.assertEqual(body["exportObjectUris"], ["https://contoso.sharepoint.com/sites/team/Shared Documents/Reports"])
        self.assertEqual(body["destinationUri"], "https://contoso.sharepoint.com/sites/archive/Shared Documents")
        self.assertNotIn("IsMoveMode", body["options"])
        self.assertEqual(request.call_args_list[1].kwargs["json"], {"copyJobInfo": {"JobId": "42"}})

    def testFolderMoveSetsMoveMode(self):
        replies = [response({"value": [{"JobId": "7"}]}), response({"JobState": 0})]
        with mock.patch.object(CopyJobCommand, "poll_interval", 0), \
                mock.patch.object(requests.Session, "request", side_effect=replies) as request:
            code = self.execute(
                "spo", "folder", "move", "-u", "https://contoso.sharepoint.com", "-s", "Docs/A", "-t", "/Docs/B",
                "--allowSchemaMismatch",
            )
        self.assertEqual(code, 0)
        options = request.call_args_list[0].kwargs["json"]["options"]
        self.assertEqual(options, {"AllowSchemaMismatch": True, "IgnoreVersionHistory": True, "IsMoveMode": True})

    def testFolderCopyJobErrorFails(self):
        failure = json.dumps({"Event": "JobError", "Message": "Target folder already exists"})
        replies = [response({"value": [{"JobId": "42"}]}), response({"JobState": 4, "Logs": [failure]}), response({"JobState": 0})]
        with mock.patch.object(CopyJobCommand, "poll_interval", 0), \
                mock.patch.object(requests.Session, "request", side_effect=replies) as request:
            code = self.execute("spo", "folder", "copy", "-u", "https://contoso.sharepoint.com", "-s", "A", "-t", "/B")
        self.assertEqual(code, 1)
        self.assertEqual(request.call_count, 2)
        self.assertIn("Target folder already exists", self.stderr.file.getvalue())

    def testFolderCopyRejectsNonHttpsSite(self):
        with mock.patch.object(requests.Session, "request") as request:
            with self.assertRaises(switchyard.InvalidOptionsError):
                self.execute("spo", "folder", "copy", "-u", "contoso", "-s", "A", "-t", "/B")
        request.assert_not_called()

    def testTenantStatusListAsRows(self):
        payload = {"value": [
            {"WorkloadDisplayName": "Exchange Online", "StatusDisplayName": "Normal service"},
            {"WorkloadDisplayName": "SharePoint Online", "StatusDisplayName": "Service degradation"},
        ]}
        with mock.patch.dict(os.environ, {"SWITCHYARD_SPO_URL": "https://contoso.sharepoint.com"}), \
                mock.patch.object(requests.Session, "request", return_value=response(payload)) as request:
            self.assertEqual(self.execute("tenant", "status", "list"), 0)
        self.assertEqual(
            request.call_args.args[1],
            "https://manage.office.com/api/v1.0/contoso.sharepoint.com/ServiceComms/CurrentStatus",
        )
        lines = self.stdout.file.getvalue().splitlines()
        self.assertEqual(lines[0].split(), ["Name", "Status"])
        self.assertIn("Service degradation", lines[3])

    def testTenantStatusListNeedsTenant(self):
        with mock.patch.dict(os.environ, clear=False):
            os.environ.pop("SWITCHYARD_SPO_URL", None)
            with mock.patch.object(requests.Session, "request") as request:
                self.assertEqual(self.execute("tenant", "status", "list"), 1)
        request.assert_not_called()
        self.assertIn("SWITCHYARD_SPO_URL", self.stderr.file.getvalue())

    def testTodoListSetPatchesName(self):
        with mock.patch.object(requests.Session, "request", return_value=response({})) as request:
            self.assertEqual(self.execute("todo", "list", "set", "--id", "AAMk", "--newName", "Groceries"), 0)
        self.assertEqual(request.call_args.args[0], "PATCH")
        self.assertTrue(request.call_args.args[1].endswith("/beta/me/todo/lists/AAMk"))
        self.assertEqual(request.call_args.kwargs["json"], {"displayName": "Groceries"})

    def testTodoListSetValidator(self):
        registry = Registry()
        Loader(registry, CATALOG).load(["todo", "list", "set"])
        validator = registry.find("todo list set").command.validate()
        self.assertEqual(validator({"id": "", "newName": "x"}), "Required option id is missing")
        self.assertEqual(validator({"id": "1", "newName": ""}), "Required option newName is missing")
        self.assertIs(validator({"id": "1", "newName": "x"}), True)


if __name__ == "__main__":
    unittest.main()

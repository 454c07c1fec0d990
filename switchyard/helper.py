"""
Switchyard help presenter.

Views
- Command help (a command was resolved):
  • usage line, description and the declared options (flags, required marker,
    description) followed by the command's documentation page, when one exists,
    rendered with rich.markdown.
  • documentation pages follow the command layout without the "commands"
    segment: <docs>/<w>.md, <docs>/<w1>/<w1>-<w2>.md, <docs>/<w1>/<w2>/<w2>-….md
- Catalog help (nothing resolved):
  • banner (program, version, description);
  • the commands directly in the current group as "name [options]" and the
    sub-groups as "group *" with their command count;
  • a group that matches nothing falls back to the root listing.

Customization
- Define a mapping named __styles__ in __main__ to override palette entries.
- colorful=False suppresses styling; fancy=True wraps the help in a panel.
"""
import os
from collections import defaultdict

from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import locate


def listing(registry, words=(), /):
    """
    Collect the catalog entries for the group named by words.

    Returns
    - (group, commands, groups): the group prefix actually listed ("" for the
      root), a {name: CommandInfo} mapping of commands directly in the group,
      and a {group name: command count} mapping of sub-groups.
    """

    def collect(group):
        commands, groups = {}, {}
        for info in registry:
            for name in info.names:
                if not name.startswith(group):
                    continue
                if (position := name.find(" ", len(group) + 1)) == -1:
                    commands[name] = info
                else:
                    groups[name[:position]] = groups.get(name[:position], 0) + 1
        return commands, groups

    group = " ".join(words) + " " if words else ""
    commands, groups = collect(group)
    if not commands and not groups:
        group = ""
        commands, groups = collect(group)
    return group, commands, groups


class Helper:
    """
    Print command or catalog help.

    parameters
    - registry: Registry, the loaded commands.
    - docs: str | os.PathLike | None, documentation root.
    - prog, version, description: banner contents (keyword-only).
    - stdout, stderr: rich consoles; help follows a fault on stderr.
    - colorful, fancy: rendering flags.
    """

    def __init__(
            self,
            registry,
            docs=None,
            /,
            *,
            prog="switchyard",
            version="",
            description="",
            stdout=None,
            stderr=None,
            colorful=True,
            fancy=False,
    ):
        self.registry = registry
        self.docs = os.fspath(docs) if docs is not None else None
        self.prog = prog
        self.version = version
        self.description = description
        self.stdout = stdout or Console()
        self.stderr = stderr or Console(stderr=True)
        self.colorful = colorful
        self.fancy = fancy

    def show(self, info=None, words=(), /, *, error=False):
        """
        Print help for info, or the catalog listing for words when info is None.
        """
        console = self.stderr if error else self.stdout
        styles = defaultdict(str, {
            "banner": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "description-section": "italic #A3A3A3",  # Neutral gray
            "usage-label": "bold #00E6FF",
            "usage-section": "bold #36C5F0",
            "section-label": "bold #FFFFFF",
            "option-name": "bold #00E6FF",
            "required": "bold #FFD600",  # AMBER marker
            "option-description": "#9CA3AF",
            "command-name": "bold #36C5F0",
            "group-name": "bold #22C55E",
            "count": "#9CA3AF",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            if not self.colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        if info is not None:
            renders = self._command(info, text)
            title = info.name
        else:
            renders = self._banner(text) + self._catalog(words, text)
            title = self.prog

        renderable = Group(*renders)
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{title} HELP".upper(), " ]", style=styles["panel-title"] if self.colorful else ""),
                title_align="left",
            )
        console.print(renderable)

    def page(self, name, /):
        """
        Documentation page path for a command name, or None when absent.
        """
        if self.docs is None:
            return None
        path = locate(self.docs, name.split(), ".md", nested=False)
        return path if os.path.isfile(path) else None

    def _banner(self, text):
        renders = [Text(), text(f"{self.prog} v{self.version}" if self.version else self.prog, "banner")]
        if self.description:
            renders.append(text(self.description, "description-section"))
        renders.append(Text())
        return renders

    def _command(self, info, text):
        renders = [Text.assemble(
            text("usage: ", "usage-label"),
            text(f"{self.prog} {info.name} [options]", "usage-section"),
        ), Text()]

        if description := info.command.description:
            renders += [text(description, "description-section"), Text()]

        if info.aliases:
            renders += [Text.assemble(text("aliases: ", "section-label"), Text(", ".join(info.aliases))), Text()]

        if info.options:
            renders.append(text("options:", "section-label"))
            table = Table.grid(padding=(0, 2))
            table.add_column(no_wrap=True)
            table.add_column()
            for option in info.options:
                flags = text(option.flags, "option-name")
                if option.required:
                    flags.append_text(text(f" <{option.name}>", "required"))
                table.add_row(Text("  ").append_text(flags), text(option.description or "", "option-description"))
            renders.append(table)

        if path := self.page(info.name):
            with open(path, encoding="utf-8") as file:
                renders += [Text(), Markdown(file.read())]

        return renders

    def _catalog(self, words, text):
        _, commands, groups = listing(self.registry, words)
        renders = []

        if commands:
            width = max(map(len, commands)) + 10
            renders += [text("Commands:", "section-label"), Text()]
            for name, info in commands.items():
                renders.append(Text.assemble(
                    "  ",
                    text(f"{name} [options]".ljust(width), "command-name"),
                    "  ",
                    text(info.command.description or "", "option-description"),
                ))

        if groups:
            if commands:
                renders.append(Text())
            width = max(map(len, groups)) + 2
            renders += [text("Commands groups:", "section-label"), Text()]
            for group, count in groups.items():
                renders.append(Text.assemble(
                    "  ",
                    text(f"{group} *".ljust(width), "group-name"),
                    "  ",
                    text(f"{count} command{'' if count == 1 else 's'}", "count"),
                ))

        renders.append(Text())
        return renders


__all__ = (
    "listing",
    "Helper",
)

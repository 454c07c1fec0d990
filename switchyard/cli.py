"""
Switchyard top-level invocation handler.

Flow of Cli.execute(argv)
1. A leading "help" word is removed and remembered (help for the remaining words).
2. argv is parsed without hints to find the command words.
3. The loader fills the registry from those words (one module or the catalog);
   the registry is sealed afterwards.
4. The command is looked up by name or alias; when found, argv is parsed again
   with the command's type hints and its short → long alias table.
5. Help is shown (exit 0) when nothing resolved, help was requested (leading
   "help", -h, --help) or no words were given.
6. The invocation is validated; a fault prints the command help on stderr, the
   fault itself, and exits with the fault's exit code.
7. The dispatcher runs the action and its exit code ends the process.

Modes
- shell=True (default): faults are rendered and the process exits.
- shell=False: faults are raised and execute() returns the exit code instead of
  exiting, which is how the library is embedded and tested.

Diagnostics
- --debug enables "debug:" trace lines on stderr (fast path misses, catalog
  size, action duration).
"""
import os
import sys

from rich.console import Console
from rich.text import Text

from . import __version__
from . import faults
from .commands import Registry
from .dispatch import Dispatcher, ask
from .faults import CommandException
from .helper import Helper
from .loader import Loader
from .parsing import parse
from .validation import validate

CATALOG = os.path.join(os.path.dirname(__file__), "catalog")
DOCS = os.path.join(os.path.dirname(__file__), "docs")
DESCRIPTION = "Manage cloud tenant services from the command line"


class Cli:
    """
    One command-line invocation.

    parameters
    - root: catalog directory (defaults to the packaged catalog).
    - docs: documentation directory (defaults to the packaged docs).
    - prog, version, description: identity shown in help and fault headers.
    - shell, fancy, colorful: fault and help rendering flags.
    - stdout, stderr: rich consoles used for output and diagnostics.
    - prompter: prompt collaborator handed to commands.
    """

    def __init__(
            self,
            root=CATALOG,
            docs=DOCS,
            /,
            *,
            prog=None,
            version=__version__,
            description=DESCRIPTION,
            shell=True,
            fancy=False,
            colorful=True,
            stdout=None,
            stderr=None,
            prompter=ask,
    ):
        self.root = root
        self.docs = docs
        self.prog = prog or getattr(__import__("__main__"), "__prog__", "switchyard")
        self.version = version
        self.description = description
        self.shell = shell
        self.fancy = fancy
        self.colorful = colorful
        self.stdout = stdout or Console()
        self.stderr = stderr or faults.console
        self.prompter = prompter

        self.registry = Registry()
        self.helper = Helper(
            self.registry,
            docs,
            prog=self.prog,
            version=version,
            description=description,
            stdout=self.stdout,
            stderr=self.stderr,
            colorful=colorful,
            fancy=fancy,
        )
        self.debug = False

    def trace(self, message, /):
        if self.debug:
            self.stderr.print(Text(f"debug: {message}", "dim" if self.colorful else ""))

    def trigger(self, fault, /, *, help=None, **options):
        """
        Surface a fault; with help, the command help is printed on stderr first.
        """
        if help is not None:
            self.helper.show(help, error=True)
        faults.trigger(
            fault,
            **options,
            prog=self.prog,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
            console=self.stderr,
        )

    def execute(self, argv=None, /):
        """
        Run one invocation.

        Returns the exit code when shell is False; exits the process otherwise.
        """
        argv = list(sys.argv[1:] if argv is None else argv)

        requested = False
        if argv and argv[0] == "help":
            requested = True
            argv = argv[1:]

        parsed = parse(argv)
        self.debug = bool(parsed.get("debug"))

        try:
            name = Loader(self.registry, self.root, trace=self.trace).load(parsed.words)
        except CommandException as fault:
            self.trigger(fault)
            return fault.exit
        self.registry.seal()

        info = self.registry.find(name) if name else None
        if info is not None:
            types = info.command.types() or {}
            invocation = parse(
                argv,
                string=types.get("string", ()),
                boolean=types.get("boolean", ()),
                alias=info.aliasing(),
            )
        else:
            invocation = parsed

        if info is None or requested or parsed.get("h") or parsed.get("help") or not parsed.words:
            self.helper.show(info, parsed.words)
            return self.exit(0)

        try:
            validate(info, invocation)
        except CommandException as fault:
            self.trigger(fault, help=info)
            return fault.exit

        dispatcher = Dispatcher(
            self.stdout,
            prompter=self.prompter,
            trace=self.trace,
            prog=self.prog,
            fancy=self.fancy,
            colorful=self.colorful,
            console=self.stderr,
        )
        return self.exit(dispatcher.dispatch(info, invocation))

    def exit(self, code, /):
        if self.shell:
            sys.exit(code)
        return code


def main(argv=None, /):
    """
    Console script entry point.
    """
    Cli().execute(argv)


__all__ = (
    "Cli",
    "main",
)

"""
Switchyard faults (fatal errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- CommandException: base type that carries message + options and
  knows how to render itself in a friendly, lowercased and actionable way.
- CommandError: the exception a command raises from its action; it may carry a
  numeric exit code.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The cli collects the context (tool, console, flags) and calls trigger(fault, **ctx).
- In shell mode, faults are rendered via rich and the process exits with the
  fault's exit code; otherwise exceptions are raised.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - loading (1110x)
      • BROKEN_COMMAND
    - options (1111x)
      • UNKNOWN_OPTION, MISSING_OPTION, INVALID_OPTIONS
    - delegated errors (1113x)
      • DELEGATED_ERROR
    - polling (1114x)
      • JOB_FAILED, JOB_TIMEOUT

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- loading errors (11xxx) ---
    BROKEN_COMMAND              = 11101

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    MISSING_OPTION              = 11117
    INVALID_OPTIONS             = 11124

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    # --- polling errors (11xxx) ---
    JOB_FAILED                  = 11141
    JOB_TIMEOUT                 = 11142

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class CommandException(Exception):
    """
    base type for fatal faults.

    recognized options
    - prog: program name shown in the header (falls back to __prog__ in __main__).
    - title, code, hint: header title, FaultCode and one-line hint.
    - exit: process exit code (defaults to 1).
    - shell, fancy, colorful: rendering flags.
    - console: rich console to print to (defaults to the module stderr console).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

    @property
    def exit(self):
        return self.options.get("exit") or 1

    def __rich__(self):
        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = text(self.options.get("prog") or getattr(__import__("__main__"), "__prog__", "switchyard"), "prog-name")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options.get("code", FaultCode.DELEGATED_ERROR).normalize(), "code"),
            " | ",
            text(self.options.get("title", "error").title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", True):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(self.exit)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class BrokenCommandError(CommandException): ...
class UnknownOptionError(CommandException): ...
class MissingOptionError(CommandException): ...
class InvalidOptionsError(CommandException): ...
class DelegatedCommandError(CommandException): ...


class CommandError(Exception):
    """
    failure raised by a command action.

    parameters
    - message: str
      human readable description, printed verbatim after the fault header.
    - code: int | None
      process exit code to use; None (or 0) means the generic failure code 1.

    subclasses may override the class attribute `fault` to report a more
    specific FaultCode in the rendered header.
    """

    fault = FaultCode.DELEGATED_ERROR

    def __init__(self, message, /, code=None):
        super().__init__(message)
        self.message = message
        self.code = code


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "CommandException",
    "BrokenCommandError",
    "UnknownOptionError",
    "MissingOptionError",
    "InvalidOptionsError",
    "DelegatedCommandError",
    "CommandError",
    "FaultCode",
    "trigger",
)

"""
Switchyard dispatch: run a resolved command's action and map the outcome to an exit code.

Execution context (what a command sees)
- log(value): renders value (see rendering.render) against the invocation's
  output/query options and prints it to stdout; None is skipped.
- await prompt(questions): asks the user through rich.prompt; the blocking
  call runs in a worker thread. One prompt is pending at a time.
- wrapper.command: canonical name of the running command.

Outcome mapping
- action() returns           → 0
- CommandError with a code   → that code
- any other exception        → 1
Failures are rendered on stderr as DelegatedCommandError faults.
"""
import asyncio
import copy
import time
from collections import namedtuple

from rich.console import Console
from rich.prompt import Confirm, Prompt

from . import faults
from .faults import CommandError, DelegatedCommandError, FaultCode
from .rendering import render

Wrapper = namedtuple("Wrapper", ("command",))


def ask(questions, /, console=None):
    """
    Ask a list of questions and collect the answers by name.

    Each question is a mapping with
    - name: key of the answer in the result.
    - message: text shown to the user.
    - type: "input" (default), "password", "confirm" or "list".
    - default: optional default answer.
    - choices: allowed answers for "list".
    """
    if isinstance(questions, dict):
        questions = [questions]

    answers = {}
    for question in questions:
        name = question["name"]
        message = question.get("message", name)
        default = question.get("default", ...)

        match question.get("type", "input"):
            case "confirm":
                answers[name] = Confirm.ask(message, console=console, default=bool(default) if default is not ... else False)
            case "password":
                answers[name] = Prompt.ask(message, console=console, password=True)
            case "list":
                choices = [str(choice) for choice in question.get("choices", ())]
                answers[name] = Prompt.ask(message, console=console, choices=choices, **({} if default is ... else {"default": str(default)}))
            case _:
                answers[name] = Prompt.ask(message, console=console, **({} if default is ... else {"default": str(default)}))
    return answers


class ExecutionContext:
    """
    Capabilities handed to a command action.

    attributes
    - wrapper: Wrapper, with the canonical command name under `command`.
    """

    def __init__(self, name, invocation, /, console, *, prompter=ask):
        self.wrapper = Wrapper(name)
        self._invocation = invocation
        self._console = console
        self._prompter = prompter

    def log(self, value, /):
        if (text := render(value, self._invocation)) is not None:
            self._console.out(text, highlight=False)

    async def prompt(self, questions, /):
        return await asyncio.to_thread(self._prompter, questions, console=self._console)


class Dispatcher:
    """
    Await a command's action and turn its outcome into an exit code.

    parameters
    - console: rich Console receiving rendered output (stdout).
    - prompter: Callable, the prompt collaborator (keyword-only).
    - trace: Callable[[str], None] | None, diagnostic sink (keyword-only).
    - **options: fault rendering options (prog, fancy, colorful, console).
    """

    def __init__(self, console=None, /, *, prompter=ask, trace=None, **options):
        self.console = console or Console()
        self.prompter = prompter
        self.trace = trace or (lambda message: None)
        self.options = options

    def dispatch(self, info, invocation, /):
        """
        Run info.command.action(invocation, context) to completion.

        Returns
        - int: the process exit code.
        """
        context = ExecutionContext(info.name, invocation, self.console, prompter=self.prompter)
        started = time.perf_counter()
        try:
            asyncio.run(info.command.action(invocation, context))
        except CommandError as error:
            return self.report(error, error.code or 1, error.fault)
        except Exception as error:
            return self.report(error, 1, FaultCode.DELEGATED_ERROR)
        finally:
            self.trace(f"{info.name} finished in {time.perf_counter() - started:.3f}s")
        return 0

    def report(self, error, exit, code, /):
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        fault = copy.replace(
            DelegatedCommandError(str(message), title="command failed", code=code),
            exit=exit,
            **self.options,
        )
        fault.options.get("console", faults.console).print(fault)
        return exit


__all__ = (
    "ask",
    "ExecutionContext",
    "Dispatcher",
    "Wrapper",
)

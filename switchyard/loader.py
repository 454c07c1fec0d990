"""
Switchyard command loader (lazy single-command resolution with full discovery fallback).

Scope
- Resolve command words to at most one command module without importing the
  whole catalog; fall back to importing everything when the fast path misses.

Fast path
- The words map onto one artifact path (see utils.locate):
    ["version"]                   → commands/version.py
    ["todo", "list"]              → todo/commands/todo-list.py
    ["spo", "folder", "copy"]     → spo/commands/folder/folder-copy.py
- The file is imported by path; it must export a module-level `command` that is
  an instance of switchyard.commands.Command.
- Words that cannot name a path segment (empty, ".", "..", containing a path
  separator) never reach the file system; like a missing file, an import
  error or a module without a valid `command`, they fall back to load_all().
  These are expected outcomes, reported only via trace().

Full discovery (load_all)
- Walks every file under the catalog root and keeps the .py files that live
  inside a "commands" directory, except tests and package markers:
  test_*.py, *_test.py, *.spec.py, __init__.py.
- Modules without a valid `command` are ignored; an import error is fatal and
  raised as BrokenCommandError.
- Discovery also runs directly for an empty word list or when the word
  "completion" appears among the words.
"""
import importlib.util
import os
import re

from .commands import Command
from .faults import BrokenCommandError, FaultCode
from .utils import locate, walk

_SKIPPED = re.compile(r"test_.*\.py|.*_test\.py|.*\.spec\.py|__init__\.py")


class Loader:
    """
    Fill a Registry from a catalog directory.

    parameters
    - registry: Registry, receives one CommandInfo per loaded command.
    - root: str | os.PathLike, the catalog root.
    - trace: Callable[[str], None] | None (keyword-only), diagnostic sink.
    """

    def __init__(self, registry, root, /, *, trace=None):
        self.registry = registry
        self.root = os.fspath(root)
        self.trace = trace or (lambda message: None)

    def load(self, words, /):
        """
        Load the command addressed by words, or the whole catalog.

        Returns the current command name (the words joined by spaces).
        """
        words = list(words)
        name = " ".join(words)

        if not words or "completion" in words:
            self.load_all()
            return name

        try:
            path = locate(self.root, words)
        except ValueError as exception:
            self.trace(f"{exception}; loading all commands")
            self.load_all()
            return name

        if not os.path.isfile(path):
            self.trace(f"no command module at {path}; loading all commands")
            self.load_all()
            return name

        try:
            module = self._import(path)
        except Exception as exception:
            self.trace(f"loading {path} failed ({type(exception).__name__}: {exception}); loading all commands")
            self.load_all()
            return name

        if not isinstance(command := getattr(module, "command", None), Command):
            self.trace(f"{path} does not export a command; loading all commands")
            self.load_all()
            return name

        self.registry.register(command)
        return name

    def load_all(self):
        """
        Import every command module under the root and register each command.

        Raises
        - BrokenCommandError when any candidate module fails to import.
        """
        for path in self.discover():
            try:
                module = self._import(path)
            except Exception as exception:
                raise BrokenCommandError(
                    f"unable to load {os.path.relpath(path, self.root)!r}: {exception}",
                    title="broken command",
                    code=FaultCode.BROKEN_COMMAND,
                    hint="fix or remove the module; the catalog must import cleanly",
                ) from exception
            if isinstance(command := getattr(module, "command", None), Command):
                self.registry.register(command)
        self.trace(f"loaded {len(self.registry)} command(s) from {self.root}")

    def discover(self):
        """
        Yield the candidate command module paths below the root, sorted.
        """
        if not os.path.isdir(self.root):
            return
        for path in walk(self.root):
            directories = os.path.relpath(os.path.dirname(path), self.root).split(os.sep)
            if "commands" not in directories:
                continue
            if not path.endswith(".py") or _SKIPPED.fullmatch(os.path.basename(path)):
                continue
            yield path

    def _import(self, path, /):
        name = "switchyard.catalog._loaded." + re.sub(r"\W", "_", os.path.relpath(path, self.root)[:-3])
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot import {path!r}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module


__all__ = (
    "Loader",
)

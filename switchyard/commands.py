"""
Switchyard command layer: the command contract, its descriptor and the registry.

What this module provides
- Command: abstract capability every command artifact implements. The loader
  recognizes a command module by the `command` object it exports being an
  instance of this class; nothing is sniffed from the module's shape.
- CommandInfo: immutable descriptor around a loaded command (resolved name,
  aliases, normalized option descriptors and the command itself).
- Registry: the set of descriptors loaded for the current invocation. It is
  explicitly constructed by the cli, filled by the loader, then sealed.

Command contract
- name / description: properties (name may be computed).
- aliases(): Iterable[str] | None
- options(): list[Declaration]; the base implementation declares the global
  options (--query, -o/--output, --verbose, --debug) that subclasses extend.
- types(): {"string": [...], "boolean": [...]} | None, hints for the parser.
- allow_unknown_options(): bool
- validate(): Callable[[Invocation], bool | str] | None
- async action(invocation, context): performs the work; resolves to None on
  success and raises (preferably CommandError) on failure.

Quick start
    from switchyard import Command, Declaration

    class VersionCommand(Command):
        name = "version"
        description = "Shows the version"

        async def action(self, invocation, context):
            context.log("v1.0.0")

    command = VersionCommand()
"""
from abc import ABC, abstractmethod

from .options import Declaration, Option
from .utils import DescriptorType


class Command(ABC):
    """
    Executable unit behind one command path (e.g. "spo folder copy").

    Subclasses provide name, description and action(); every other hook has a
    conservative default so thin commands stay thin.
    """

    @property
    @abstractmethod
    def name(self):
        """
        Canonical, space-separated command path.
        """

    @property
    @abstractmethod
    def description(self):
        """
        One-line summary shown by the help presenter.
        """

    def aliases(self):
        """
        Alternate command paths resolving to this command (None when there are none).
        """
        return None

    def options(self):
        """
        Option declarations, in declaration order.

        Subclasses extend this list: `return [...] + super().options()`.
        """
        return [
            Declaration("--query [query]", "JMESPath query string. See http://jmespath.org/ for more information and examples"),
            Declaration("-o, --output [output]", "Output type. json,text. Default text", ("json", "text")),
            Declaration("--verbose", "Runs command with verbose logging"),
            Declaration("--debug", "Runs command with debug logging"),
        ]

    def types(self):
        """
        Parser type hints: a mapping with optional "string" and "boolean" lists.
        """
        return None

    def allow_unknown_options(self):
        return False

    def validate(self):
        """
        Return a callable taking the parsed invocation and returning True or an
        error message, or None when the command has no semantic validation.
        """
        return None

    @abstractmethod
    async def action(self, invocation, context):
        """
        Perform the command.

        parameters
        - invocation: Invocation, the validated options (catch-all under "_").
        - context: ExecutionContext exposing log(), prompt() and wrapper.
        """


class CommandInfo(metaclass=DescriptorType):
    """
    Metadata envelope around a loaded command.

    Fields (read-only)
    - name: str, the command's canonical name.
    - aliases: tuple[str, ...]
    - options: tuple[Option, ...] in declaration order.
    - command: Command
    """
    __introspectable__ = (
        "name",
        "aliases",
        "options",
        "command",
    )

    def __init__(self, command, /):
        if not isinstance(command, Command):
            raise TypeError(f"{type(self).__typename__} requires a command, not {type(command).__name__!r}")

        if not isinstance(name := command.name, str) or not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} command name must be a non-empty string")

        self._name = name
        self._aliases = tuple(alias.strip() for alias in command.aliases() or () if alias.strip())
        self._options = tuple(map(Option.parse, command.options()))
        self._command = command

    @property
    def names(self):
        """
        Canonical name followed by every alias.
        """
        return (self.name,) + self.aliases

    def option(self, key, /):
        """
        Return the declared option matching a parsed key (name, short or long).

        Raises
        - KeyError when no declared option matches.
        """
        for option in self.options:
            if option.matches(key):
                return option
        raise KeyError(key)

    def aliasing(self):
        """
        Parser alias table mapping every short spelling to its long spelling.
        """
        return {option.short: option.long for option in self.options if option.short and option.long}


class Registry:
    """
    Commands loaded for one invocation.

    lifecycle
    - empty at construction;
    - register() adds descriptors while loading;
    - seal() marks the end of loading; the registry is read-only afterwards.
    """

    def __init__(self):
        self._commands = []
        self._sealed = False

    def __len__(self):
        return len(self._commands)

    def __iter__(self):
        return iter(tuple(self._commands))

    def __bool__(self):
        return bool(self._commands)

    @property
    def sealed(self):
        return self._sealed

    def register(self, command, /):
        """
        Wrap a command into a CommandInfo and store it.

        Raises
        - RuntimeError when the registry is already sealed.
        """
        if self._sealed:
            raise RuntimeError("registry is sealed; commands cannot be registered after loading")
        self._commands.append(info := CommandInfo(command))
        return info

    def seal(self):
        self._sealed = True
        return self

    def find(self, name, /):
        """
        Return the first descriptor whose name or one of whose aliases equals name.
        """
        for info in self._commands:
            if name in info.names:
                return info
        return None


__all__ = (
    "Command",
    "CommandInfo",
    "Registry",
)

"""
Switchyard utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the loader, the help presenter and the
  descriptors so that path conventions and read-only views stay consistent.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- view("attr")
  • Read-only property factory exposing a private backing field (self._attr) as an
    immutable view (tuple, mappingproxy, frozenset).

- DescriptorType
  • Metaclass for immutable descriptors: read-only views over __introspectable__
    fields, a __typename__ label and stable __repr__/__rich_repr__.

- locate(root, words, suffix)
  • Map command words onto the hierarchical artifact layout shared by command
    modules and documentation pages:
      one word    → <root>/commands/<word><suffix>            (docs: <root>/<word><suffix>)
      two words   → <root>/<w1>/commands/<w1>-<w2><suffix>
      three+      → <root>/<w1>/commands/<w2>/<w2>-<w3>-…<suffix>

- walk(root)
  • Recursive, sorted enumeration of every file below a directory.

Stability and contract
- Names not in __all__ are internal and may change without notice.
"""
import functools
import operator
import os
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def view(name, /):
    """
    Define a read-only property over the private backing field "_{name}".

    behavior
    - Sequence (non-str) → tuple
    - Mapping           → MappingProxyType
    - Set               → frozenset
    - other types       → returned as-is
    """
    if not isinstance(name, str):
        raise TypeError("view() argument must be a string")

    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


class DescriptorType(type):
    """
    Metaclass that gives descriptors a stable, introspectable shape.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property over
      its "_{name}" backing field (see view()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def locate(root, words, /, suffix=".py", *, nested=True):
    """
    Compute the artifact path for a sequence of command words.

    parameters
    - root: str | os.PathLike
      directory the layout is anchored at (catalog root or docs root).
    - words: Sequence[str]
      the command words, at least one.
    - suffix: str
      file extension appended to the final segment.
    - nested: bool (keyword-only)
      when True (command modules), files live inside a 'commands' segment;
      when False (documentation pages), the 'commands' segment is omitted.

    returns
    - str: the joined path; existence is not checked here.

    raises
    - ValueError when no words are given, or when a word is empty, is a
      relative directory reference or contains a path separator; the
      result always stays below root.
    """
    if not words:
        raise ValueError("locate() requires at least one command word")

    words = list(map(str, words))
    for word in words:
        if not word or word in (os.curdir, os.pardir) or any(separator and separator in word for separator in ("/", os.sep, os.altsep)):
            raise ValueError(f"locate() cannot map {word!r} to a path segment")

    segment = ["commands"] if nested else []

    match len(words):
        case 1:
            chunks = segment + [words[0] + suffix]
        case 2:
            chunks = [words[0]] + segment + ["-".join(words) + suffix]
        case _:
            chunks = [words[0]] + segment + [words[1], "-".join(words[1:]) + suffix]

    return os.path.join(root, *chunks)


def walk(root, /):
    """
    Enumerate every file below root, depth first, in sorted order.

    Directories named __pycache__ are skipped; a root that is itself a file
    yields only that file.
    """
    if os.path.isfile(root):
        yield os.fspath(root)
        return

    for current, directories, files in os.walk(root):
        directories[:] = sorted(directory for directory in directories if directory != "__pycache__")
        for file in sorted(files):
            yield os.path.join(current, file)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "view",
    "locate",
    "walk",

    # Types
    "UnsetType",
    "DescriptorType",

    # Constants
    "Unset",
)

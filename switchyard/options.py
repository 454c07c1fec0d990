r"""
Switchyard option declarations and descriptors.

Overview
- Declaration
  • Raw, command-authored record: the declaration string (e.g. "-u, --webUrl <webUrl>"),
    an optional description and optional autocomplete values.

- Option
  • Normalized descriptor built from a declaration: short/long spellings (without
    dashes), canonical name, required marker, autocomplete hints and description.
  • Option.parse(declaration) performs the extraction.

Extraction rules
- The declaration string is split on runs of spaces, commas and pipes.
- A token starting with "--" sets the long spelling; a token starting with a single
  "-" sets the short spelling. Any other token (placeholders such as "<webUrl>" or
  "[date]") only contributes to the required marker.
- name is the long spelling when present, otherwise the short one. This holds
  regardless of the order in which the spellings appear.
- A "<...>" placeholder anywhere in the declaration marks the option as required;
  "[...]" placeholders (or none at all) leave it optional.

Validation highlights
- Spellings must match r"[^\W_][\w-]*" once their dashes are removed.
- A declaration without any spelling is rejected (ValueError).
- Autocomplete values must be strings; duplicates are rejected.

Quick example:
    >>> option = Option.parse("-u, --webUrl <webUrl>")
    >>> option.name, option.short, option.long, option.required
    ('webUrl', 'u', 'webUrl', True)
"""
import re
from collections import namedtuple

from .utils import *

Declaration = namedtuple("Declaration", ("option", "description", "autocomplete"), defaults=(None, ()))
Declaration.__doc__ = """
Raw option declaration authored by a command.

fields
- option: str, e.g. "-p, --period <period>" or "--allowSchemaMismatch".
- description: str | None, short help shown by the help presenter.
- autocomplete: Iterable[str], suggested values for completion tooling.
"""


def _sanitize_spelling(cls, spelling, /):
    """
    Internal: validate one option spelling (dashes already removed).

    Raises
    - TypeError: when the spelling is not a string.
    - ValueError: when the spelling is empty or not a valid option identifier.
    """
    if not isinstance(spelling, str):
        raise TypeError(f"{cls.__typename__} spellings must be strings")
    elif not re.fullmatch(r"[^\W_][\w-]*", spelling):
        raise ValueError(f"{cls.__typename__} spelling {spelling!r} is not a valid option name")
    return spelling


def _sanitize_autocomplete(cls, autocomplete, /):
    """
    Internal: normalize autocomplete values into a duplicate-free tuple.
    """
    if autocomplete is None:
        return ()
    values = []
    for value in autocomplete:
        if not isinstance(value, str):
            raise TypeError(f"{cls.__typename__} 'autocomplete' values must be strings")
        elif value in values:
            raise ValueError(f"{cls.__typename__} 'autocomplete' cannot contain duplicates")
        values.append(value)
    return tuple(values)


class Option(metaclass=DescriptorType):
    """
    Normalized representation of one command-line option.

    Fields (read-only)
    - name: str, canonical identifier (long spelling wins over short).
    - short: str | None, single-dash spelling without the dash.
    - long: str | None, double-dash spelling without the dashes.
    - required: bool, True when the declaration carried a "<...>" placeholder.
    - autocomplete: tuple[str, ...], suggested values.
    - description: str | None, help text.

    Invariants
    - name is never empty.
    - when both spellings exist, short aliases long for parsing purposes.
    """
    __introspectable__ = (
        "name",
        "short",
        "long",
        "required",
        "autocomplete",
        "description",
    )

    def __init__(self, /, short=Unset, long=Unset, *, required=False, autocomplete=(), description=Unset):
        if short is Unset and long is Unset:
            raise ValueError(f"{type(self).__typename__} must specify a short or a long spelling")

        self._short = _sanitize_spelling(type(self), short) if short is not Unset else None
        self._long = _sanitize_spelling(type(self), long) if long is not Unset else None
        self._name = self._long or self._short
        self._required = bool(required)
        self._autocomplete = _sanitize_autocomplete(type(self), autocomplete)

        if not isinstance(description, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'description' must be a string")
        self._description = coalesce(description, "").strip() or None

    @classmethod
    def parse(cls, declaration, /):
        """
        Build an Option from a Declaration (or a bare declaration string).

        Returns
        - Option with spellings, name and required marker extracted as described
          in the module documentation.

        Raises
        - TypeError: when declaration is neither a Declaration nor a string.
        - ValueError: when no spelling can be extracted.
        """
        if isinstance(declaration, str):
            declaration = Declaration(declaration)
        elif not isinstance(declaration, Declaration):
            raise TypeError(f"{cls.__typename__} declaration must be a string or a declaration")

        short = long = Unset
        for token in filter(None, re.split(r"[ ,|]+", declaration.option)):
            if token.startswith("--"):
                long = token[2:]
            elif token.startswith("-"):
                short = token[1:]

        return cls(
            short,
            long,
            required="<" in declaration.option,
            autocomplete=declaration.autocomplete,
            description=declaration.description or Unset,
        )

    @property
    def spellings(self):
        """
        All keys under which a parsed value for this option may appear.
        """
        return tuple(dict.fromkeys(filter(None, (self.name, self.short, self.long))))

    @property
    def flags(self):
        """
        Command-line spellings with their dashes, short first (e.g. "-u, --webUrl").
        """
        return ", ".join(filter(None, (
            self.short and "-" + self.short,
            self.long and "--" + self.long,
        )))

    def matches(self, key, /):
        """
        Return True when a parsed option key refers to this option.
        """
        return key in self.spellings


__all__ = (
    "Declaration",
    "Option",
)

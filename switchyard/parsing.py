r"""
Switchyard argument parsing (minimist-compatible tokenizer).

Scope
- Turn a raw argument vector into an Invocation: a mapping of option keys to
  values plus the ordered positional words under the reserved "_" key.
- Runs twice per process: once without hints (to find the command words) and
  once with the resolved command's type hints and short → long alias table.

Token grammar (processed left to right)
- "--"                  → stops option parsing; every later token is positional.
- "--key=value"         → key = value ("false" → False when key is boolean).
- "--no-key"            → key = False.
- "--key value"         → key = value when the next token does not start with "-"
                          and key is not boolean.
- "--key true|false"    → key = bool when key is boolean.
- "--key"               → key = True ("" when key is a string).
- "-abc"                → a = b = True; c takes the following token as above.
- "-n5" / "-n=5"        → n = 5.
- anything else         → positional, kept verbatim.

Value inference
- Values of keys not listed in `string` are coerced when they look numeric
  (decimal, exponent or 0x-prefixed hex).
- Keys listed in `boolean` default to False and never consume the next token.
- Repeated keys accumulate into a list; boolean keys are overwritten instead.
- Setting a key through `alias` sets every spelling it is aliased to.

Notes
- Dotted keys are stored flat ("a.b" is one key).
- Positionals are never coerced, so command words round-trip verbatim.
"""
import re
from collections import defaultdict

_NUMBER = re.compile(r"0x[0-9a-f]+|[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:e[-+]?\d+)?", re.IGNORECASE)


class Invocation(dict):
    """
    Parsed command-line invocation.

    A plain dict of option keys to values; positional words live under "_".
    """

    @property
    def words(self):
        """
        Positional words, in order.
        """
        return self.setdefault("_", [])

    def defined(self, key, /):
        """
        Return True when key holds a value (None counts as undefined).
        """
        return self.get(key) is not None


def _number(value, /):
    """
    Internal: coerce a numeric-looking string, or return it unchanged.
    """
    if not isinstance(value, str) or not _NUMBER.fullmatch(value):
        return value
    if value[:2].lower() == "0x":
        return int(value, 16)
    try:
        return int(value)
    except ValueError:
        return float(value)


def _aliases(alias, /):
    """
    Internal: expand {short: long} into a symmetric {key: [other spellings]} table.
    """
    table = defaultdict(list)
    for key, targets in alias.items():
        targets = [targets] if isinstance(targets, str) else list(targets)
        for target in targets:
            table[key].append(target)
            table[target].extend(other for other in [key] + targets if other != target)
    return {key: list(dict.fromkeys(values)) for key, values in table.items()}


def parse(argv, /, string=(), boolean=(), alias=None):
    """
    Parse argv into an Invocation.

    parameters
    - argv: Iterable[str], raw arguments without the program name.
    - string: Iterable[str], keys whose values are never coerced.
    - boolean: Iterable[str], keys treated as switches.
    - alias: Mapping[str, str | Iterable[str]] | None, spelling aliases.

    returns
    - Invocation
    """
    argv = list(argv)
    aliases = _aliases(alias or {})

    def spellings(key):
        return [key] + aliases.get(key, [])

    strings = {spelling for key in string or () for spelling in spellings(key)}
    booleans = {spelling for key in boolean or () for spelling in spellings(key)}

    invocation = Invocation({"_": []})

    def store(key, value):
        if key not in invocation or key in booleans or isinstance(invocation[key], bool):
            invocation[key] = value
        elif isinstance(invocation[key], list):
            invocation[key].append(value)
        else:
            invocation[key] = [invocation[key], value]

    def assign(key, value):
        if key not in strings:
            value = _number(value)
        for spelling in spellings(key):
            store(spelling, value)

    def flag(key):
        return "" if key in strings else True

    for key in boolean or ():
        assign(key, False)

    trailing = []
    if "--" in argv:
        index = argv.index("--")
        argv, trailing = argv[:index], argv[index + 1:]

    index = 0
    while index < len(argv):
        token = argv[index]
        upcoming = argv[index + 1] if index + 1 < len(argv) else None

        if match := re.fullmatch(r"--([^=]+)=(.*)", token, re.DOTALL):
            key, value = match.groups()
            assign(key, value != "false" if key in booleans else value)

        elif match := re.match(r"--no-(.+)", token, re.DOTALL):
            assign(match.group(1), False)

        elif match := re.match(r"--(.+)", token, re.DOTALL):
            key = match.group(1)
            if upcoming is not None and not upcoming.startswith("-") and key not in booleans:
                assign(key, upcoming)
                index += 1
            elif upcoming in ("true", "false"):
                assign(key, upcoming == "true")
                index += 1
            else:
                assign(key, flag(key))

        elif re.match(r"-[^-]+", token):
            letters = token[1:-1]
            broken = False

            for position, letter in enumerate(letters):
                rest = token[position + 2:]

                if rest == "-":
                    assign(letter, rest)
                    continue

                if letter.isalpha() and rest.startswith("="):
                    assign(letter, rest[1:])
                    broken = True
                    break

                if letter.isalpha() and re.search(r"-?\d+(\.\d*)?(e-?\d+)?$", rest):
                    assign(letter, rest)
                    broken = True
                    break

                if position + 1 < len(letters) and re.match(r"\W", letters[position + 1]):
                    assign(letter, rest)
                    broken = True
                    break

                assign(letter, flag(letter))

            key = token[-1]
            if not broken and key != "-":
                if upcoming and not re.match(r"(-|--)[^-]", upcoming) and key not in booleans:
                    assign(key, upcoming)
                    index += 1
                elif upcoming in ("true", "false"):
                    assign(key, upcoming == "true")
                    index += 1
                else:
                    assign(key, flag(key))

        else:
            invocation.words.append(token)

        index += 1

    invocation.words.extend(trailing)
    return invocation


__all__ = (
    "Invocation",
    "parse",
)

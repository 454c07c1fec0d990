"""
Switchyard output rendering: turn a logged value into display text.

Pipeline for render(value, options)
1. None passes through (the caller prints nothing).
2. date / datetime values become str(value).
3. options["query"] (unless help is requested) filters the value with JMESPath.
4. options["output"] == "json" serializes with two-space indentation.
5. Text output: a non-list value is wrapped in a list; the first non-None
   element decides how the list is shown.
   • scalars         → one element per line (os.linesep)
   • one mapping     → aligned "key: value" block, keys sorted
   • several mappings→ table with one column per key, first-seen order

Text conventions
- True / False / None print as JSON literals inside blocks and tables.
- Nested lists and mappings are JSON-encoded inline.
- Tables are rendered with rich.table.Table on an uncoloured in-memory console.
"""
import datetime
import io
import json
import os
from collections.abc import Mapping

import jmespath
from rich.box import Box
from rich.console import Console
from rich.table import Table
from rich.text import Text

# blank frame with a dashed header rule
_PLAIN = Box(
    "    \n"
    "    \n"
    " -  \n"
    "    \n"
    "    \n"
    "    \n"
    "    \n"
    "    \n",
    ascii=True,
)


def _inline(value, /):
    """
    Internal: one-line text for a cell or block value.
    """
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    if isinstance(value, Mapping | list | tuple):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def _lines(values, /):
    return os.linesep.join("" if value is None else _inline(value) for value in values)


def _block(mapping, /):
    keys = sorted(map(str, mapping))
    width = max(map(len, keys), default=0)
    values = {str(key): value for key, value in mapping.items()}
    return "\n".join(f"{key.ljust(width)}: {_inline(values[key])}" for key in keys) + "\n"


def _table(rows, /):
    columns = {}
    for row in rows:
        if isinstance(row, Mapping):
            columns.update(dict.fromkeys(map(str, row)))

    table = Table(
        box=_PLAIN,
        show_edge=False,
        pad_edge=False,
        header_style="",
        highlight=False,
    )
    for column in columns:
        table.add_column(Text(column), no_wrap=True, overflow="ignore")

    for row in rows:
        if not isinstance(row, Mapping):
            continue
        cells = {str(key): value for key, value in row.items()}
        table.add_row(*(Text(_inline(cells[column])) if column in cells else Text("") for column in columns))

    buffer = io.StringIO()
    console = Console(file=buffer, width=1 << 16, color_system=None, highlight=False, emoji=False, legacy_windows=False)
    console.print(table)
    return "\n".join(line.rstrip() for line in buffer.getvalue().splitlines()) + "\n"


def render(value, options=None, /):
    """
    Render a logged value as display text.

    parameters
    - value: Any, the value a command passed to context.log().
    - options: Mapping | None, the parsed invocation; reads "query", "help"
      and "output".

    returns
    - str, or None when value is None.

    raises
    - jmespath.exceptions.JMESPathError on a malformed query.
    """
    options = options or {}

    if value is None:
        return None

    if isinstance(value, datetime.date):
        return str(value)

    if (query := options.get("query")) and not options.get("help"):
        value = jmespath.search(str(query), value)

    if options.get("output") == "json":
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)

    values = value if isinstance(value, list) else [value]
    first = next((element for element in values if element is not None), None)

    if not isinstance(first, Mapping):
        return _lines(values)

    if len(values) == 1:
        return _block(first)

    return _table(values)


__all__ = (
    "render",
)

"""Building SQL text that the driver sends on the caller's behalf."""

from __future__ import annotations

import json
from typing import Iterable

from chnative.errors import OtherError


def column_name_to_string(name: str) -> str:
    """Quote a column name for use in an INSERT statement.

    Purely numeric names are left as they are; any other name is wrapped
    in backticks. Names that already contain a backtick are rejected.
    """
    if all(ch.isnumeric() for ch in name):
        return name
    if "`" in name:
        quoted = json.dumps(name, ensure_ascii=False)
        raise OtherError(f"Column name {quoted} shouldn't contains backticks.")
    return f"`{name}`"


def insert_query(table: str, column_names: Iterable[str]) -> str:
    """Return the INSERT statement header for ``table`` and its columns."""
    fields = ", ".join(column_name_to_string(name) for name in column_names)
    return f"INSERT INTO {table} ({fields}) VALUES"
from __future__ import annotations

"""JSON-like value types used at the command-argument boundary.

Command arguments travel to the editor host as plain JSON, so the argument
lists built for fix actions are typed with these aliases rather than `Any`.
"""

from typing import TypeAlias


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

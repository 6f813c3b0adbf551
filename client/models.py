"""Client-side state records."""

from dataclasses import asdict, dataclass, field
from typing import Any

Row = dict[str, Any]


@dataclass
class Connection:
    """The connection the client is currently using."""

    url: str
    dialect: str
    connected: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Connection":
        return cls(
            url=data["url"],
            dialect=data.get("dialect") or data["type"],
            connected=bool(data.get("connected", True)),
        )


@dataclass
class Column:
    """Column metadata as cached on the client."""

    name: str
    type: str
    nullable: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Column":
        return cls(
            name=data["name"],
            type=data.get("type", ""),
            nullable=bool(data.get("nullable", True)),
        )


@dataclass
class Table:
    """Point-in-time cache of a table's columns and rows."""

    name: str
    columns: list[Column] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Table":
        return cls(
            name=data["name"],
            columns=[Column.from_dict(c) for c in data.get("columns", [])],
            rows=[dict(r) for r in data.get("rows", [])],
        )


@dataclass
class EditSession:
    """Unsaved edits for one row.

    ``original`` is the snapshot taken when editing started and is never
    mutated; it is ``None`` for a row that does not exist yet.
    """

    row_index: int
    original: Row | None
    edited: Row
    is_new: bool = False

"""
Row shapes and the protocol every metadata source implements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Union


@dataclass
class ColumnRow:
    """
    One row of a describe-columns query, for example

    +----------+-------------+-----+
    | Field    | Type        | Key |
    +----------+-------------+-----+
    | ssn      | varchar(50) | PRI |
    """
    name: str
    data_type: str
    column_key: Optional[str] = None


@dataclass
class ForeignKeyRow:
    """
    One row of a foreign key usage query, for example

    +-------------+-----------------+-----------------------+------------------------+
    | COLUMN_NAME | CONSTRAINT_NAME | REFERENCED_TABLE_NAME | REFERENCED_COLUMN_NAME |
    +-------------+-----------------+-----------------------+------------------------+
    | student_id  | fk1             | student               | id                     |
    """
    column_name: str
    constraint_name: str
    referenced_table_name: str
    referenced_column_name: str


class MetadataSource(Protocol):
    """
    Read-only access to a database catalog.

    Sources may yield the row dataclasses above or plain sequences in the
    same field order.
    """

    def describe_columns(self, table_name: str) -> Iterable[Union[ColumnRow, Sequence[Any]]]:
        ...

    def describe_foreign_keys(self, table_name: str) -> Iterable[Union[ForeignKeyRow, Sequence[Any]]]:
        ...

    def list_tables(self) -> List[str]:
        ...

    def normalize_table_name(self, table_name: str) -> str:
        """Return the table name in the case the catalog reports it."""
        ...

    def connect(self) -> None:
        ...

    def disconnect(self) -> None:
        ...

    def __enter__(self) -> MetadataSource:
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...


def to_column_row(row: Any) -> ColumnRow:
    """Decode a describe-columns row."""
    if isinstance(row, ColumnRow):
        return row
    name, data_type, column_key = row
    if not isinstance(name, str) or not isinstance(data_type, str):
        raise TypeError(f"Malformed column row: {row!r}")
    return ColumnRow(name=name, data_type=data_type, column_key=column_key)


def to_foreign_key_row(row: Any) -> ForeignKeyRow:
    """Decode a foreign key usage row."""
    if isinstance(row, ForeignKeyRow):
        return row
    column_name, constraint_name, referenced_table, referenced_column = row
    values = (column_name, constraint_name, referenced_table, referenced_column)
    if not all(isinstance(v, str) for v in values):
        raise TypeError(f"Malformed foreign key row: {row!r}")
    return ForeignKeyRow(
        column_name=column_name,
        constraint_name=constraint_name,
        referenced_table_name=referenced_table,
        referenced_column_name=referenced_column,
    )

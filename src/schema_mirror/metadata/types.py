"""
Vendor type name to DataType lookup.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence, Tuple, Union

from schema_mirror.models import DataType

TypePrefixes = Union[Mapping[str, DataType], Sequence[Tuple[str, DataType]]]


# MySQL type prefixes, matched against COLUMN_TYPE / DATA_TYPE values
MYSQL_TYPE_PREFIXES: Tuple[Tuple[str, DataType], ...] = (
    ("tinyint(1)", DataType.BOOLEAN),
    ("bool", DataType.BOOLEAN),
    ("bit", DataType.BOOLEAN),
    ("tinyint", DataType.INTEGER),
    ("smallint", DataType.INTEGER),
    ("mediumint", DataType.INTEGER),
    ("int", DataType.INTEGER),
    ("bigint", DataType.INTEGER),
    ("float", DataType.FLOAT),
    ("double", DataType.FLOAT),
    ("real", DataType.FLOAT),
    ("decimal", DataType.DECIMAL),
    ("numeric", DataType.DECIMAL),
    ("datetime", DataType.DATETIME),
    ("timestamp", DataType.DATETIME),
    ("date", DataType.DATE),
    ("time", DataType.STRING),
    ("year", DataType.INTEGER),
    ("char", DataType.STRING),
    ("varchar", DataType.STRING),
    ("tinytext", DataType.STRING),
    ("text", DataType.STRING),
    ("mediumtext", DataType.STRING),
    ("longtext", DataType.STRING),
    ("enum", DataType.STRING),
    ("set", DataType.STRING),
    ("binary", DataType.BINARY),
    ("varbinary", DataType.BINARY),
    ("tinyblob", DataType.BINARY),
    ("blob", DataType.BINARY),
    ("mediumblob", DataType.BINARY),
    ("longblob", DataType.BINARY),
    ("json", DataType.JSON),
)

# Oracle ALL_TAB_COLUMNS.DATA_TYPE prefixes
ORACLE_TYPE_PREFIXES: Tuple[Tuple[str, DataType], ...] = (
    ("number", DataType.DECIMAL),
    ("integer", DataType.INTEGER),
    ("float", DataType.FLOAT),
    ("binary_float", DataType.FLOAT),
    ("binary_double", DataType.FLOAT),
    ("varchar2", DataType.STRING),
    ("nvarchar2", DataType.STRING),
    ("char", DataType.STRING),
    ("nchar", DataType.STRING),
    ("clob", DataType.STRING),
    ("nclob", DataType.STRING),
    ("long raw", DataType.BINARY),
    ("long", DataType.STRING),
    ("date", DataType.DATETIME),  # Oracle DATE includes time
    ("timestamp", DataType.DATETIME),
    ("raw", DataType.BINARY),
    ("blob", DataType.BINARY),
)


def _entries(prefixes: TypePrefixes) -> Iterable[Tuple[str, DataType]]:
    if isinstance(prefixes, Mapping):
        return prefixes.items()
    return prefixes


def resolve_data_type(type_string: str, prefixes: TypePrefixes = MYSQL_TYPE_PREFIXES) -> DataType:
    """
    Resolve a vendor type string by longest matching prefix.

    Matching is case-insensitive. Among prefixes of equal length the first
    one in the table wins. Returns DataType.UNKNOWN when nothing matches.
    """
    type_lower = (type_string or "").strip().lower()
    best: DataType = DataType.UNKNOWN
    best_len = 0
    for prefix, data_type in _entries(prefixes):
        if len(prefix) > best_len and type_lower.startswith(prefix.lower()):
            best = data_type
            best_len = len(prefix)
    return best

"""
Metadata sources for MySQL, Oracle and static YAML schema descriptions.

Provides the row shapes consumed by the builder and the type-prefix lookup
used to resolve vendor type names.
"""

from schema_mirror.metadata.base import (
    ColumnRow,
    ForeignKeyRow,
    MetadataSource,
)
from schema_mirror.metadata.types import (
    MYSQL_TYPE_PREFIXES,
    ORACLE_TYPE_PREFIXES,
    resolve_data_type,
)
from schema_mirror.metadata.static import StaticMetadataSource
from schema_mirror.metadata.mysql import MySQLMetadataSource
from schema_mirror.metadata.oracle import OracleMetadataSource

__all__ = [
    "ColumnRow",
    "ForeignKeyRow",
    "MetadataSource",
    "MYSQL_TYPE_PREFIXES",
    "ORACLE_TYPE_PREFIXES",
    "resolve_data_type",
    "StaticMetadataSource",
    "MySQLMetadataSource",
    "OracleMetadataSource",
]

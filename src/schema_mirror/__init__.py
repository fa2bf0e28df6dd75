"""
Schema Mirror - relational schema metadata with bidirectional foreign keys

Extracts columns, key classification and foreign key constraints from a
database catalog and builds a SchemaModel in which every table also lists
the constraints of other tables that point at it.

Features:
- MySQL (INFORMATION_SCHEMA), Oracle (data dictionary) and YAML sources
- Longest-prefix resolution of vendor type names
- Optional parallel per-table extraction
- Reverse-link resolution with consistency checks
"""

__version__ = "0.1.0"

from schema_mirror.models import (
    ColumnInfo,
    ConstraintPart,
    DataType,
    ForeignKeyConstraint,
    KeyType,
    SchemaModel,
    TableInfo,
)
from schema_mirror.errors import (
    ConstraintConsistencyError,
    MetadataQueryError,
    SchemaMirrorError,
    UnresolvedReferenceError,
)
from schema_mirror.builder import build_schema, build_table_info, extract_schema
from schema_mirror.resolver import resolve_reverse_links, validate_and_reverse
from schema_mirror.config import ExtractionConfig

__all__ = [
    # Core models
    "ColumnInfo",
    "ConstraintPart",
    "DataType",
    "ForeignKeyConstraint",
    "KeyType",
    "SchemaModel",
    "TableInfo",
    # Errors
    "ConstraintConsistencyError",
    "MetadataQueryError",
    "SchemaMirrorError",
    "UnresolvedReferenceError",
    # Building and resolving
    "build_schema",
    "build_table_info",
    "extract_schema",
    "resolve_reverse_links",
    "validate_and_reverse",
    # Configuration
    "ExtractionConfig",
]

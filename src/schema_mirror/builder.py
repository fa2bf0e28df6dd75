"""
Table model builder.

Queries a metadata source for one table's columns and foreign key usage and
assembles a TableInfo. build_schema runs the builder over a set of tables,
optionally on a thread pool, and collects the results into a SchemaModel.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from schema_mirror.errors import MetadataQueryError
from schema_mirror.metadata.base import MetadataSource, to_column_row, to_foreign_key_row
from schema_mirror.metadata.types import MYSQL_TYPE_PREFIXES, TypePrefixes, resolve_data_type
from schema_mirror.models import ColumnInfo, KeyType, SchemaModel, TableInfo

logger = logging.getLogger(__name__)

DESCRIBE_COLUMNS = "describe_columns"
DESCRIBE_FOREIGN_KEYS = "describe_foreign_keys"


def build_table_info(
    table_name: str,
    source: MetadataSource,
    type_prefixes: TypePrefixes = MYSQL_TYPE_PREFIXES,
) -> TableInfo:
    """
    Build the TableInfo of a single table.

    Args:
        table_name: Table to describe
        source: Metadata source answering describe_columns/describe_foreign_keys
        type_prefixes: Vendor type prefix lookup used for DataType resolution

    Returns:
        TableInfo with columns and outbound constraints; constraint_sources empty

    Raises:
        MetadataQueryError: If either query fails or a row cannot be decoded
    """
    if not table_name:
        raise ValueError("table_name must be a non-empty string")

    table = TableInfo(table_name=table_name)

    try:
        for raw in source.describe_columns(table_name):
            row = to_column_row(raw)
            table.add_column(ColumnInfo(
                name=row.name,
                key_type=KeyType.from_column_key(row.column_key),
                data_type=resolve_data_type(row.data_type, type_prefixes),
            ))
    except Exception as e:
        raise MetadataQueryError(table_name, DESCRIBE_COLUMNS, e) from e

    try:
        for raw in source.describe_foreign_keys(table_name):
            row = to_foreign_key_row(raw)
            table.add_foreign_key_part(
                constraint_name=row.constraint_name,
                column_name=row.column_name,
                referenced_table=row.referenced_table_name,
                referenced_column=row.referenced_column_name,
            )
    except Exception as e:
        raise MetadataQueryError(table_name, DESCRIBE_FOREIGN_KEYS, e) from e

    logger.debug(
        f"Built {table_name}: {len(table.columns)} columns, "
        f"{len(table.foreign_key_constraints)} foreign keys"
    )
    return table


def build_schema(
    tables: Optional[Iterable[str]],
    source: MetadataSource,
    workers: int = 1,
    skip_failed: bool = False,
    type_prefixes: TypePrefixes = MYSQL_TYPE_PREFIXES,
) -> SchemaModel:
    """
    Build a TableInfo for every table and collect them into a SchemaModel.

    Args:
        tables: Table names; None or empty means every table the source lists
        source: Metadata source
        workers: Number of builder threads
        skip_failed: Log and omit tables whose metadata query fails
        type_prefixes: Vendor type prefix lookup

    Returns:
        Unresolved SchemaModel
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    # Keys must match the referenced table names the source reports
    table_names: List[str] = list(dict.fromkeys(
        source.normalize_table_name(name) for name in tables or []
    ))
    if not table_names:
        table_names = source.list_tables()

    logger.info(f"Building metadata for {len(table_names)} tables with {workers} worker(s)")

    def build_one(name: str) -> Optional[TableInfo]:
        try:
            return build_table_info(name, source, type_prefixes)
        except MetadataQueryError as e:
            if not skip_failed:
                raise
            logger.error(f"Skipping table {name}: {e}")
            return None

    if workers == 1:
        results = [build_one(name) for name in table_names]
    else:
        # map() yields in submission order and re-raises the first failure;
        # leaving the with-block waits for every worker to finish
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(build_one, table_names))

    model = SchemaModel()
    for table in results:
        if table is not None:
            model.add_table(table)

    return model


def extract_schema(
    tables: Optional[Iterable[str]],
    source: MetadataSource,
    workers: int = 1,
    skip_failed: bool = False,
    legacy_table_name: bool = False,
    type_prefixes: TypePrefixes = MYSQL_TYPE_PREFIXES,
) -> SchemaModel:
    """Build every table, then resolve reverse links once."""
    model = build_schema(
        tables,
        source,
        workers=workers,
        skip_failed=skip_failed,
        type_prefixes=type_prefixes,
    )
    model.resolve_links(legacy_table_name=legacy_table_name)
    return model

"""
Exception types raised while building and resolving a SchemaModel.

MetadataQueryError is recoverable per table. ConstraintConsistencyError and
UnresolvedReferenceError mean the metadata itself is broken and abort the
resolve pass.
"""

from __future__ import annotations

from typing import Iterable, Optional


class SchemaMirrorError(Exception):
    """Base class for recoverable schema_mirror errors."""


class MetadataQueryError(SchemaMirrorError):
    """A metadata query for a table failed to run or returned an undecodable row."""

    def __init__(self, table_name: str, query: str, cause: Optional[BaseException] = None):
        self.table_name = table_name
        self.query = query
        self.cause = cause
        super().__init__(f"{query} failed for table {table_name}: {cause}")


class ConstraintConsistencyError(AssertionError):
    """A foreign key constraint's parts name more than one remote table."""

    def __init__(self, table_name: str, constraint_name: str, remote_tables: Iterable[str]):
        self.table_name = table_name
        self.constraint_name = constraint_name
        self.remote_tables = sorted(remote_tables)
        if self.remote_tables:
            detail = f"references multiple tables: {', '.join(self.remote_tables)}"
        else:
            detail = "has no parts"
        super().__init__(f"Constraint {constraint_name} on table {table_name} {detail}")


class UnresolvedReferenceError(LookupError):
    """A constraint references a table that is not part of the schema model."""

    def __init__(self, table_name: str, constraint_name: str, remote_table_name: str):
        self.table_name = table_name
        self.constraint_name = constraint_name
        self.remote_table_name = remote_table_name
        super().__init__(
            f"Constraint {constraint_name} on table {table_name} references "
            f"unknown table {remote_table_name}"
        )

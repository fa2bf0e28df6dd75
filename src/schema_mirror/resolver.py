"""
Reverse-link resolver.

Computes the reverse of every outbound foreign key constraint and attaches it
to the referenced table's constraint_sources, so each table knows what it
references and what references it.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from schema_mirror.errors import ConstraintConsistencyError, UnresolvedReferenceError
from schema_mirror.models import ForeignKeyConstraint, TableInfo

logger = logging.getLogger(__name__)


def validate_and_reverse(
    table_name: str,
    constraint: ForeignKeyConstraint,
    legacy_table_name: bool = False,
) -> Tuple[str, ForeignKeyConstraint]:
    """
    Check that a constraint targets exactly one table and build its reverse.

    Returns:
        Tuple of (remote table name, reversed constraint)

    Raises:
        ConstraintConsistencyError: If the parts name zero or several remote tables
    """
    remote_tables = constraint.remote_table_names
    if len(remote_tables) != 1:
        raise ConstraintConsistencyError(table_name, constraint.name, remote_tables)

    reverse = ForeignKeyConstraint(
        name=constraint.name,
        parts=[p.reversed(legacy_table_name=legacy_table_name) for p in constraint.parts],
    )
    return next(iter(remote_tables)), reverse


def resolve_reverse_links(
    tables: Dict[str, TableInfo],
    legacy_table_name: bool = False,
) -> None:
    """
    Populate constraint_sources of every referenced table.

    Every constraint is validated before the first table is modified, so a
    ConstraintConsistencyError or UnresolvedReferenceError leaves the tables
    untouched. Inbound lists are filled ordered by source table name, then
    constraint name.

    Calling this twice on the same tables appends the reverse links twice;
    SchemaModel.resolve_links guards against that.
    """
    pending: List[Tuple[str, ForeignKeyConstraint]] = []

    for table_name in sorted(tables):
        table = tables[table_name]
        for constraint_name in sorted(table.foreign_key_constraints):
            constraint = table.foreign_key_constraints[constraint_name]
            remote_table, reverse = validate_and_reverse(
                table_name, constraint, legacy_table_name=legacy_table_name
            )
            if remote_table not in tables:
                raise UnresolvedReferenceError(table_name, constraint_name, remote_table)
            pending.append((remote_table, reverse))

    for remote_table, reverse in pending:
        tables[remote_table].constraint_sources.append(reverse)

    logger.info(f"Resolved {len(pending)} reverse links across {len(tables)} tables")

"""
Oracle metadata source using oracledb.

Reads columns and PK/FK constraints from the Oracle data dictionary views
and reports key classification in the same PRI/MUL vocabulary as MySQL.
"""

from __future__ import annotations

import logging
from typing import Any, List

from schema_mirror.metadata.base import ColumnRow, ForeignKeyRow

logger = logging.getLogger(__name__)


class OracleMetadataSource:
    """
    Metadata source backed by the Oracle data dictionary.

    Uses Oracle data dictionary views:
    - ALL_TABLES
    - ALL_TAB_COLUMNS
    - ALL_CONSTRAINTS / ALL_CONS_COLUMNS
    - ALL_INDEXES / ALL_IND_COLUMNS

    A single connection is used, so builder calls against one source
    should run with workers=1.
    """

    def __init__(self, connection_string: str, schema: str):
        """
        Initialize source with Oracle connection.

        Args:
            connection_string: Oracle connection string (user/pwd@host:port/service)
            schema: Schema/owner name
        """
        self.connection_string = connection_string
        self.schema = schema.upper()
        self._conn = None

    def connect(self) -> None:
        """Establish database connection."""
        import oracledb

        # Parse connection string: user/pwd@host:port/service
        parts = self.connection_string.split("@")
        user_pwd = parts[0]
        host_service = parts[1] if len(parts) > 1 else ""

        user, password = user_pwd.split("/", 1) if "/" in user_pwd else (user_pwd, "")

        if ":" in host_service:
            host_port, service = host_service.rsplit("/", 1) if "/" in host_service else (host_service, "")
            host, port = host_port.split(":") if ":" in host_port else (host_port, "1521")
            dsn = oracledb.makedsn(host, int(port), service_name=service)
        else:
            dsn = host_service

        self._conn = oracledb.connect(user=user, password=password, dsn=dsn)
        logger.info(f"Connected to Oracle database as {user}")

    def disconnect(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    def normalize_table_name(self, table_name: str) -> str:
        """Unquoted Oracle identifiers are stored upper case in the dictionary."""
        return table_name.upper()

    def _fetch(self, sql: str, **binds: Any) -> List[Any]:
        if not self._conn:
            self.connect()

        cursor = self._conn.cursor()
        try:
            cursor.execute(sql, **binds)
            return list(cursor)
        finally:
            cursor.close()

    def describe_columns(self, table_name: str) -> List[ColumnRow]:
        rows = self._fetch("""
            SELECT
                c.column_name,
                c.data_type,
                CASE
                    WHEN pk.column_name IS NOT NULL THEN 'PRI'
                    WHEN ix.column_name IS NOT NULL THEN 'MUL'
                    ELSE NULL
                END AS column_key
            FROM all_tab_columns c
            LEFT JOIN (
                SELECT cc.column_name
                FROM all_constraints k
                JOIN all_cons_columns cc
                    ON k.owner = cc.owner
                    AND k.constraint_name = cc.constraint_name
                WHERE k.owner = :owner
                    AND k.table_name = :table_name
                    AND k.constraint_type = 'P'
            ) pk ON pk.column_name = c.column_name
            LEFT JOIN (
                SELECT DISTINCT ic.column_name
                FROM all_indexes i
                JOIN all_ind_columns ic
                    ON i.owner = ic.index_owner
                    AND i.index_name = ic.index_name
                WHERE i.table_owner = :owner
                    AND i.table_name = :table_name
                    AND i.uniqueness = 'NONUNIQUE'
                    AND ic.column_position = 1
            ) ix ON ix.column_name = c.column_name
            WHERE c.owner = :owner AND c.table_name = :table_name
            ORDER BY c.column_id
        """, owner=self.schema, table_name=table_name.upper())

        return [ColumnRow(name=r[0], data_type=r[1], column_key=r[2]) for r in rows]

    def describe_foreign_keys(self, table_name: str) -> List[ForeignKeyRow]:
        rows = self._fetch("""
            SELECT
                cc.column_name,
                c.constraint_name,
                rc.table_name AS ref_table,
                rcc.column_name AS ref_column
            FROM all_constraints c
            JOIN all_cons_columns cc
                ON c.owner = cc.owner
                AND c.constraint_name = cc.constraint_name
            JOIN all_constraints rc
                ON c.r_owner = rc.owner
                AND c.r_constraint_name = rc.constraint_name
            JOIN all_cons_columns rcc
                ON rc.owner = rcc.owner
                AND rc.constraint_name = rcc.constraint_name
                AND cc.position = rcc.position
            WHERE c.owner = :owner
                AND c.table_name = :table_name
                AND c.constraint_type = 'R'
            ORDER BY c.constraint_name, cc.position
        """, owner=self.schema, table_name=table_name.upper())

        return [
            ForeignKeyRow(
                column_name=r[0],
                constraint_name=r[1],
                referenced_table_name=r[2],
                referenced_column_name=r[3],
            )
            for r in rows
        ]

    def list_tables(self) -> List[str]:
        """Get all table names in the schema."""
        rows = self._fetch("""
            SELECT table_name
            FROM all_tables
            WHERE owner = :owner
            ORDER BY table_name
        """, owner=self.schema)
        return [r[0] for r in rows]

"""
In-memory metadata source, optionally loaded from a YAML schema description.

Example YAML:

    tables:
      student:
        columns:
          - {name: id, type: int(11), key: PRI}
      registration:
        columns:
          - {name: student_id, type: int(11), key: MUL}
        foreign_keys:
          - {column: student_id, constraint: fk1, references: student, referenced_column: id}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from schema_mirror.metadata.base import ColumnRow, ForeignKeyRow

logger = logging.getLogger(__name__)


class StaticMetadataSource:
    """Metadata source answering from a dictionary of table descriptions."""

    def __init__(self, tables: Dict[str, Dict[str, Any]]):
        self._tables = tables

    @classmethod
    def from_yaml(cls, path: Path) -> StaticMetadataSource:
        """Load table descriptions from a YAML file."""
        path = Path(path)
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        tables = data.get("tables", {}) or {}
        logger.info(f"Loaded {len(tables)} table descriptions from {path}")
        return cls(tables)

    def connect(self) -> None:
        """Nothing to connect; descriptions are already in memory."""

    def disconnect(self) -> None:
        """Nothing to release."""

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    def normalize_table_name(self, table_name: str) -> str:
        return table_name

    def _table(self, table_name: str) -> Dict[str, Any]:
        if table_name not in self._tables:
            raise KeyError(f"Unknown table: {table_name}")
        return self._tables[table_name] or {}

    def describe_columns(self, table_name: str) -> List[ColumnRow]:
        return [
            ColumnRow(name=c["name"], data_type=c.get("type", ""), column_key=c.get("key"))
            for c in self._table(table_name).get("columns", []) or []
        ]

    def describe_foreign_keys(self, table_name: str) -> List[ForeignKeyRow]:
        return [
            ForeignKeyRow(
                column_name=fk["column"],
                constraint_name=fk["constraint"],
                referenced_table_name=fk["references"],
                referenced_column_name=fk["referenced_column"],
            )
            for fk in self._table(table_name).get("foreign_keys", []) or []
            if fk.get("references")
        ]

    def list_tables(self) -> List[str]:
        return sorted(self._tables.keys())

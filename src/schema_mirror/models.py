"""
Core data models for the schema_mirror package.

Defines the table, column and foreign key structures that make up a
SchemaModel, including the inbound (reverse) side of every constraint.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


class KeyType(str, Enum):
    """Key classification of a column."""
    NONE = "none"
    PRIMARY = "primary"
    MULTI = "multi"  # Non-unique index

    @classmethod
    def from_column_key(cls, column_key: Optional[str]) -> KeyType:
        """Map a catalog COLUMN_KEY value ("PRI", "MUL", ...) to a KeyType."""
        if column_key == "PRI":
            return cls.PRIMARY
        if column_key == "MUL":
            return cls.MULTI
        return cls.NONE


class DataType(str, Enum):
    """Semantic value types resolved from vendor type names."""
    UNKNOWN = "unknown"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    DATE = "date"
    BOOLEAN = "boolean"
    BINARY = "binary"
    JSON = "json"


@dataclass
class ColumnInfo:
    """Metadata for a single column."""
    name: str
    key_type: KeyType = KeyType.NONE
    data_type: DataType = DataType.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "key_type": self.key_type.value,
            "data_type": self.data_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ColumnInfo:
        return cls(
            name=data["name"],
            key_type=KeyType(data.get("key_type", "none")),
            data_type=DataType(data.get("data_type", "unknown")),
        )


@dataclass(frozen=True)
class ConstraintPart:
    """One column leg of a (possibly composite) foreign key."""
    table_name: str
    column_name: str
    # Either the target or the source of the constraint, depending on direction
    remote_table_name: str
    remote_column_name: str

    def reversed(self, legacy_table_name: bool = False) -> ConstraintPart:
        """
        Swap the local and remote roles of this part.

        With legacy_table_name the local table of the reversed part is set to
        the remote column name, matching what earlier migration tooling wrote.
        """
        return ConstraintPart(
            table_name=self.remote_column_name if legacy_table_name else self.remote_table_name,
            column_name=self.remote_column_name,
            remote_table_name=self.table_name,
            remote_column_name=self.column_name,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "table_name": self.table_name,
            "column_name": self.column_name,
            "remote_table_name": self.remote_table_name,
            "remote_column_name": self.remote_column_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> ConstraintPart:
        return cls(
            table_name=data["table_name"],
            column_name=data["column_name"],
            remote_table_name=data["remote_table_name"],
            remote_column_name=data["remote_column_name"],
        )


@dataclass
class ForeignKeyConstraint:
    """A named foreign key made of one or more ConstraintParts."""
    name: str
    parts: List[ConstraintPart] = field(default_factory=list)

    @property
    def remote_table_names(self) -> Set[str]:
        """Distinct remote tables named by the parts."""
        return {p.remote_table_name for p in self.parts}

    @property
    def column_pairs(self) -> Set[Tuple[str, str]]:
        """Set of (local column, remote column) pairs."""
        return {(p.column_name, p.remote_column_name) for p in self.parts}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "parts": [p.to_dict() for p in self.parts],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ForeignKeyConstraint:
        return cls(
            name=data["name"],
            parts=[ConstraintPart.from_dict(p) for p in data.get("parts", [])],
        )


@dataclass
class TableInfo:
    """Columns and constraints of one table, in both directions."""
    table_name: str
    columns: Dict[str, ColumnInfo] = field(default_factory=dict)

    # Tables referenced by this table through foreign keys
    referenced_tables: Set[str] = field(default_factory=set)

    # Constraint name -> outbound constraint
    foreign_key_constraints: Dict[str, ForeignKeyConstraint] = field(default_factory=dict)

    # Reversed constraints of other tables that target this table
    constraint_sources: List[ForeignKeyConstraint] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return list(self.columns.keys())

    def get_column(self, name: str) -> Optional[ColumnInfo]:
        return self.columns.get(name)

    def primary_key_columns(self) -> List[str]:
        """Names of the columns classified as primary key."""
        return [c.name for c in self.columns.values() if c.key_type == KeyType.PRIMARY]

    def add_column(self, column: ColumnInfo) -> None:
        """Store a column; a repeated name replaces the earlier entry."""
        self.columns[column.name] = column

    def add_foreign_key_part(
        self,
        constraint_name: str,
        column_name: str,
        referenced_table: str,
        referenced_column: str,
    ) -> None:
        """Record one FK usage row against the named constraint."""
        self.referenced_tables.add(referenced_table)
        constraint = self.foreign_key_constraints.get(constraint_name)
        if constraint is None:
            constraint = ForeignKeyConstraint(name=constraint_name)
            self.foreign_key_constraints[constraint_name] = constraint
        constraint.parts.append(ConstraintPart(
            table_name=self.table_name,
            column_name=column_name,
            remote_table_name=referenced_table,
            remote_column_name=referenced_column,
        ))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table_name": self.table_name,
            "columns": [c.to_dict() for c in self.columns.values()],
            "referenced_tables": sorted(self.referenced_tables),
            "foreign_key_constraints": [
                c.to_dict() for c in self.foreign_key_constraints.values()
            ],
            "constraint_sources": [c.to_dict() for c in self.constraint_sources],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TableInfo:
        table = cls(table_name=data["table_name"])
        for col_data in data.get("columns", []):
            table.add_column(ColumnInfo.from_dict(col_data))
        table.referenced_tables = set(data.get("referenced_tables", []))
        for con_data in data.get("foreign_key_constraints", []):
            constraint = ForeignKeyConstraint.from_dict(con_data)
            table.foreign_key_constraints[constraint.name] = constraint
        table.constraint_sources = [
            ForeignKeyConstraint.from_dict(c) for c in data.get("constraint_sources", [])
        ]
        return table


@dataclass
class SchemaModel:
    """
    Mapping from table name to TableInfo.

    Built once by the builder, then resolved once to fill every table's
    inbound constraints. Treat as read-only afterwards.
    """
    tables: Dict[str, TableInfo] = field(default_factory=dict)
    resolved: bool = False
    legacy_reverse_table_name: bool = False

    def add_table(self, table: TableInfo) -> None:
        self.tables[table.table_name] = table

    def get_table(self, name: str) -> Optional[TableInfo]:
        return self.tables.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.tables

    def __len__(self) -> int:
        return len(self.tables)

    def resolve_links(self, legacy_table_name: bool = False) -> None:
        """
        Populate inbound constraints of every referenced table.

        Runs at most once per model; later calls only log a warning.
        """
        from schema_mirror.resolver import resolve_reverse_links

        if self.resolved:
            logger.warning("Schema model already resolved, skipping reverse links")
            return

        resolve_reverse_links(self.tables, legacy_table_name=legacy_table_name)
        self.resolved = True
        self.legacy_reverse_table_name = legacy_table_name

    def dependency_order(self) -> List[str]:
        """
        Order table names so referenced tables come before their referrers.

        Self references are ignored and references to tables outside the
        model are skipped. Tables on a cycle are appended in sorted order.
        """
        in_degree: Dict[str, int] = {t: 0 for t in self.tables}
        adj: Dict[str, List[str]] = {t: [] for t in self.tables}

        for name, table in self.tables.items():
            for parent in table.referenced_tables:
                if parent == name or parent not in self.tables:
                    continue
                adj[parent].append(name)
                in_degree[name] += 1

        # Kahn's algorithm
        queue = [t for t in self.tables if in_degree[t] == 0]
        result: List[str] = []

        while queue:
            queue.sort()
            node = queue.pop(0)
            result.append(node)

            for child in adj[node]:
                in_degree[child] -= 1
                if in_degree[child] == 0:
                    queue.append(child)

        if len(result) != len(self.tables):
            remaining = set(self.tables) - set(result)
            logger.warning(f"Foreign key cycle among tables: {', '.join(sorted(remaining))}")
            result.extend(sorted(remaining))

        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resolved": self.resolved,
            "legacy_reverse_table_name": self.legacy_reverse_table_name,
            "tables": {name: t.to_dict() for name, t in self.tables.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SchemaModel:
        model = cls(
            resolved=data.get("resolved", False),
            legacy_reverse_table_name=data.get("legacy_reverse_table_name", False),
        )
        for name, tdata in data.get("tables", {}).items():
            model.tables[name] = TableInfo.from_dict(tdata)
        return model

    def save(self, path: Path) -> None:
        """Write the model to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> SchemaModel:
        """Read a model written by save()."""
        with open(Path(path), "r") as f:
            return cls.from_dict(json.load(f))

from __future__ import annotations

from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import NoSuchTableError


class SchemaCatalog:
    """Memoised view of the live schema, scoped to one request's connection."""

    def __init__(self, connection: Connection, schema: Optional[str] = None):
        self._inspector = inspect(connection)
        self._schema = schema
        self._tables: dict[str, bool] = {}
        self._columns: dict[str, frozenset[str]] = {}

    def has_table(self, table: str) -> bool:
        if table not in self._tables:
            self._tables[table] = self._inspector.has_table(table, schema=self._schema)
        return self._tables[table]

    def columns(self, table: str) -> frozenset[str]:
        if table not in self._columns:
            if not self.has_table(table):
                self._columns[table] = frozenset()
            else:
                try:
                    info = self._inspector.get_columns(table, schema=self._schema)
                except NoSuchTableError:
                    info = []
                self._columns[table] = frozenset(column["name"] for column in info)
        return self._columns[table]

    def has_column(self, table: str, column: str) -> bool:
        return column in self.columns(table)

"""Statement construction shared by the blocking check and the cascade executor.

Only identifiers taken from a validated dependency graph are rendered into SQL, and SQLAlchemy
quotes them; the record identifier always travels as a bound parameter.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy import bindparam, column, delete, func, literal_column, select, table, update
from sqlalchemy.sql.expression import ColumnElement, Executable, TableClause

from app.services.dependency_graph import DependencyEdge, EdgeAction, EntityDefinition

SOFT_STATUS_VALUES: dict[str, Any] = {"status": "inactive", "is_active": False}


class StatementMode(str, Enum):
    COUNT = "count"
    MUTATE = "mutate"


def _table_clause(name: str, *column_names: str) -> TableClause:
    return table(name, *(column(column_name) for column_name in dict.fromkeys(column_names)))


def _record_param(record_id: str):
    return bindparam("record_id", value=record_id)


def build_edge_predicate(edge: DependencyEdge, record_id: str) -> tuple[TableClause, ColumnElement]:
    """Return the dependent table and the condition selecting rows that reference the record.

    Direct edges compare the dependent column with the record id. Chained edges walk the hops
    from the one closest to the root outward, nesting one ``IN (SELECT id ...)`` per hop.
    """

    dependent = _table_clause(edge.table, edge.column)
    record = _record_param(record_id)
    if not edge.via:
        return dependent, dependent.c[edge.column] == record

    innermost = edge.via[-1]
    hop_table = _table_clause(innermost.table, innermost.id_column, innermost.column)
    selection = select(hop_table.c[innermost.id_column]).where(hop_table.c[innermost.column] == record)
    for hop in reversed(edge.via[:-1]):
        hop_table = _table_clause(hop.table, hop.id_column, hop.column)
        selection = select(hop_table.c[hop.id_column]).where(hop_table.c[hop.column].in_(selection))
    return dependent, dependent.c[edge.column].in_(selection)


def build_edge_statement(edge: DependencyEdge, record_id: str, mode: StatementMode) -> Executable:
    dependent, predicate = build_edge_predicate(edge, record_id)
    if mode is StatementMode.COUNT:
        return select(func.count()).select_from(dependent).where(predicate)
    if edge.action is EdgeAction.NULLIFY:
        return update(dependent).where(predicate).values({edge.column: None})
    return delete(dependent).where(predicate)


def build_root_select(entity: EntityDefinition, record_id: str, *, lock: bool = True) -> Executable:
    root = _table_clause(entity.table, entity.id_column)
    statement = (
        select(literal_column("*"))
        .select_from(root)
        .where(root.c[entity.id_column] == _record_param(record_id))
    )
    return statement.with_for_update() if lock else statement


def build_root_delete(entity: EntityDefinition, record_id: str) -> Executable:
    root = _table_clause(entity.table, entity.id_column)
    return delete(root).where(root.c[entity.id_column] == _record_param(record_id))


def build_soft_delete(
    entity: EntityDefinition,
    record_id: str,
    status_column: str,
    *,
    touch_updated_at: bool = False,
) -> Executable:
    columns = [entity.id_column, status_column]
    if touch_updated_at:
        columns.append("updated_at")
    root = _table_clause(entity.table, *columns)
    values: dict[str, Any] = {status_column: SOFT_STATUS_VALUES[status_column]}
    if touch_updated_at:
        values["updated_at"] = func.now()
    return (
        update(root)
        .where(root.c[entity.id_column] == _record_param(record_id))
        .values(values)
    )

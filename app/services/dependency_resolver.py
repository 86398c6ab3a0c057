from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.sql.expression import Executable

from app.services.cascade_errors import SchemaDrift
from app.services.cascade_statements import StatementMode, build_edge_statement
from app.services.dependency_graph import DependencyEdge, DependencyGraph, EntityDefinition
from app.services.schema_catalog import SchemaCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanStep:
    """One resolved edge: the rows of ``edge.table`` that reference the record, and what to do."""

    edge: DependencyEdge
    record_id: str

    @property
    def table(self) -> str:
        return self.edge.table

    @property
    def column(self) -> str:
        return self.edge.column

    @property
    def action(self):
        return self.edge.action

    def count_statement(self) -> Executable:
        return build_edge_statement(self.edge, self.record_id, StatementMode.COUNT)

    def mutation_statement(self) -> Executable:
        return build_edge_statement(self.edge, self.record_id, StatementMode.MUTATE)


@dataclass(frozen=True)
class CascadePlan:
    entity: EntityDefinition
    record_id: str
    steps: tuple[PlanStep, ...] = ()
    schema_drift: tuple[SchemaDrift, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.steps


class DependencyResolver:
    """Turns an entity's declared edges into an ordered plan the live schema can execute."""

    def __init__(self, graph: DependencyGraph, catalog: SchemaCatalog):
        self.graph = graph
        self.catalog = catalog

    def resolve(self, entity_name: str, record_id: str) -> CascadePlan:
        entity = self.graph.get(entity_name)
        steps: list[PlanStep] = []
        drift: list[SchemaDrift] = []

        for edge in entity.dependents:
            if edge.optional and not self.catalog.has_table(edge.table):
                logger.debug(
                    "Skipping %s for %s: optional table %s is not deployed",
                    edge.describe(),
                    entity.name,
                    edge.table,
                )
                continue

            missing = self._find_missing_reference(edge)
            if missing is not None:
                missing_name, reason = missing
                logger.warning(
                    "Schema drift for %s: skipping %s because %s (%s)",
                    entity.name,
                    edge.describe(),
                    missing_name,
                    reason,
                )
                drift.append(
                    SchemaDrift(
                        entity=entity.name,
                        table=edge.table,
                        column=edge.column,
                        missing=missing_name,
                        reason=reason,
                    )
                )
                continue

            steps.append(PlanStep(edge=edge, record_id=record_id))

        return CascadePlan(
            entity=entity,
            record_id=record_id,
            steps=tuple(steps),
            schema_drift=tuple(drift),
        )

    def _find_missing_reference(self, edge: DependencyEdge) -> Optional[tuple[str, str]]:
        required = [(edge.table, edge.column)]
        for hop in edge.via:
            required.append((hop.table, hop.column))
            required.append((hop.table, hop.id_column))

        for table, column in required:
            if not self.catalog.has_table(table):
                return table, "table not found"
            if not self.catalog.has_column(table, column):
                return f"{table}.{column}", "column not found"
        return None

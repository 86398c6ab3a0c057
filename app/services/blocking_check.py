from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.cascade_errors import BlockingDependent, DependencyCheckError, SchemaDrift
from app.services.dependency_resolver import CascadePlan, DependencyResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockingReport:
    entity: str
    record_id: str
    dependents: tuple[BlockingDependent, ...] = ()
    schema_drift: tuple[SchemaDrift, ...] = ()

    @property
    def blocked(self) -> bool:
        return bool(self.dependents)

    @property
    def total(self) -> int:
        return sum(dependent.count for dependent in self.dependents)


class BlockingCheckEvaluator:
    """Read-only dry run of a cascade: counts what every plan step would touch."""

    def __init__(self, db: Session, resolver: DependencyResolver):
        self.db = db
        self.resolver = resolver

    def check_blocking(self, entity_name: str, record_id: str) -> BlockingReport:
        plan = self.resolver.resolve(entity_name, record_id)
        return self.evaluate(plan)

    def evaluate(self, plan: CascadePlan) -> BlockingReport:
        dependents: list[BlockingDependent] = []
        for step in plan.steps:
            try:
                count = self.db.execute(step.count_statement()).scalar_one()
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception(
                    "Dependency check failed for %s %s at %s",
                    plan.entity.name,
                    plan.record_id,
                    step.edge.describe(),
                )
                raise DependencyCheckError(plan.entity.name, step.table, step.column) from exc

            if count > 0:
                dependents.append(
                    BlockingDependent(
                        table=step.table,
                        column=step.column,
                        count=int(count),
                        via=step.edge.via_labels,
                        action=step.action.value,
                    )
                )

        return BlockingReport(
            entity=plan.entity.name,
            record_id=plan.record_id,
            dependents=tuple(dependents),
            schema_drift=plan.schema_drift,
        )

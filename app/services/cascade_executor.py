from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.cascade_errors import CascadeError, CascadeIncompleteError, RecordNotFoundError, SchemaDrift
from app.services.cascade_statements import (
    SOFT_STATUS_VALUES,
    build_root_delete,
    build_root_select,
    build_soft_delete,
)
from app.services.dependency_graph import EdgeAction, EntityDefinition
from app.services.dependency_resolver import CascadePlan, PlanStep
from app.services.schema_catalog import SchemaCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    table: str
    column: str
    action: EdgeAction
    affected: int
    via: tuple[str, ...] = ()


@dataclass
class DeletionSummary:
    entity: str
    record_id: str
    deleted_record: dict[str, Any]
    steps: list[StepOutcome] = field(default_factory=list)
    schema_drift: tuple[SchemaDrift, ...] = ()
    soft_deleted: bool = False
    soft_field: Optional[str] = None
    soft_value: Any = None

    def _totals(self, action: EdgeAction) -> dict[str, int]:
        totals: dict[str, int] = {}
        for outcome in self.steps:
            if outcome.action is action and outcome.affected > 0:
                totals[outcome.table] = totals.get(outcome.table, 0) + outcome.affected
        return totals

    @property
    def deleted(self) -> dict[str, int]:
        return self._totals(EdgeAction.DELETE)

    @property
    def nullified(self) -> dict[str, int]:
        return self._totals(EdgeAction.NULLIFY)

    @property
    def summary(self) -> dict[str, int]:
        """Rows touched per dependent table, deletions and nullifications combined."""
        combined = dict(self.deleted)
        for table, count in self.nullified.items():
            combined[table] = combined.get(table, 0) + count
        return combined

    @property
    def total_affected(self) -> int:
        return sum(outcome.affected for outcome in self.steps) + 1


def _integrity_diagnostics(exc: IntegrityError) -> dict[str, Optional[str]]:
    """Pull table/constraint details out of the driver error where the driver exposes them."""

    original = getattr(exc, "orig", None)
    diag = getattr(original, "diag", None)
    if diag is not None:
        return {
            "table": getattr(diag, "table_name", None),
            "constraint": getattr(diag, "constraint_name", None),
            "detail": getattr(diag, "message_detail", None) or str(original),
        }
    return {"table": None, "constraint": None, "detail": str(original or exc)}


class CascadeExecutor:
    """Applies a cascade plan and the root delete inside one transaction."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, plan: CascadePlan) -> DeletionSummary:
        entity = plan.entity
        record_id = plan.record_id
        try:
            deleted_record = self._lock_root(entity, record_id)
            outcomes = [self._run_step(step) for step in plan.steps]

            result = self.db.execute(build_root_delete(entity, record_id))
            if result.rowcount == 0:
                raise RecordNotFoundError(entity.name, record_id)

            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            diagnostics = _integrity_diagnostics(exc)
            logger.error(
                "Cascade for %s %s rolled back on an undeclared reference: %s",
                entity.name,
                record_id,
                diagnostics["detail"],
            )
            raise CascadeIncompleteError(entity.name, record_id, **diagnostics) from exc
        except CascadeError:
            self.db.rollback()
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Cascade for %s %s rolled back", entity.name, record_id)
            raise

        summary = DeletionSummary(
            entity=entity.name,
            record_id=record_id,
            deleted_record=deleted_record,
            steps=outcomes,
            schema_drift=plan.schema_drift,
        )
        logger.info(
            "Deleted %s %s: %d row(s) affected across %d table(s)",
            entity.name,
            record_id,
            summary.total_affected,
            len(summary.summary) + 1,
        )
        return summary

    def soft_delete(self, entity: EntityDefinition, record_id: str, catalog: SchemaCatalog) -> Optional[DeletionSummary]:
        """Mark the root inactive instead of removing it; ``None`` when it has no usable status column."""

        status_column = next(
            (
                name
                for name in entity.soft_status_columns
                if name in SOFT_STATUS_VALUES and catalog.has_column(entity.table, name)
            ),
            None,
        )
        if status_column is None:
            return None

        touch_updated_at = catalog.has_column(entity.table, "updated_at")
        try:
            deleted_record = self._lock_root(entity, record_id)
            self.db.execute(
                build_soft_delete(entity, record_id, status_column, touch_updated_at=touch_updated_at)
            )
            self.db.commit()
        except CascadeError:
            self.db.rollback()
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Soft delete of %s %s rolled back", entity.name, record_id)
            raise

        value = SOFT_STATUS_VALUES[status_column]
        logger.warning(
            "Soft-deleted %s %s by setting %s=%r; the row is still referenced",
            entity.name,
            record_id,
            status_column,
            value,
        )
        deleted_record[status_column] = value
        return DeletionSummary(
            entity=entity.name,
            record_id=record_id,
            deleted_record=deleted_record,
            soft_deleted=True,
            soft_field=status_column,
            soft_value=value,
        )

    def _lock_root(self, entity: EntityDefinition, record_id: str) -> dict[str, Any]:
        row = self.db.execute(build_root_select(entity, record_id)).mappings().first()
        if row is None:
            raise RecordNotFoundError(entity.name, record_id)
        return dict(row)

    def _run_step(self, step: PlanStep) -> StepOutcome:
        result = self.db.execute(step.mutation_statement())
        affected = max(result.rowcount or 0, 0)
        logger.debug("%s %s: %d row(s)", step.action.value, step.edge.describe(), affected)
        return StepOutcome(
            table=step.table,
            column=step.column,
            action=step.action,
            affected=affected,
            via=step.edge.via_labels,
        )

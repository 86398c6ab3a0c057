"""Shapes engine results into the bodies returned to API callers."""
from __future__ import annotations

from app.schemas.deletion import (
    BlockedDependentsRead,
    BlockingDependentRead,
    DeletionResultRead,
    DependencyEdgeRead,
    DependencyPreviewRead,
    EntityDependenciesRead,
    SchemaDriftRead,
)
from app.services.blocking_check import BlockingReport
from app.services.cascade_errors import BlockedByDependentsError, BlockingDependent, SchemaDrift
from app.services.cascade_executor import DeletionSummary
from app.services.dependency_graph import EntityDefinition


def _dependent(dependent: BlockingDependent) -> BlockingDependentRead:
    return BlockingDependentRead(**dependent.as_dict())


def _drift(items: tuple[SchemaDrift, ...]) -> list[SchemaDriftRead]:
    return [SchemaDriftRead(**item.as_dict()) for item in items]


def deletion_result(summary: DeletionSummary) -> DeletionResultRead:
    if summary.soft_deleted:
        message = (
            f"Record is still referenced; marked inactive via {summary.soft_field} instead of deleting"
        )
    elif summary.summary:
        message = (
            f"Record deleted with {summary.total_affected - 1} dependent row(s) "
            f"across {len(summary.summary)} table(s)"
        )
    else:
        message = "Record deleted successfully"

    return DeletionResultRead(
        message=message,
        summary=summary.summary,
        deleted=summary.deleted,
        nullified=summary.nullified,
        total_affected=0 if summary.soft_deleted else summary.total_affected,
        deleted_record=summary.deleted_record,
        soft_deleted=summary.soft_deleted,
        field=summary.soft_field,
        value=summary.soft_value,
        schema_drift=_drift(summary.schema_drift),
    )


def blocked_result(exc: BlockedByDependentsError) -> BlockedDependentsRead:
    return BlockedDependentsRead(
        message=f"{exc}. Retry with cascade=true to remove or unlink them.",
        entity=exc.entity,
        record_id=exc.record_id,
        dependents=[_dependent(dependent) for dependent in exc.dependents],
    )


def dependency_preview(report: BlockingReport) -> DependencyPreviewRead:
    return DependencyPreviewRead(
        entity=report.entity,
        record_id=report.record_id,
        blocked=report.blocked,
        total=report.total,
        dependents=[_dependent(dependent) for dependent in report.dependents],
        schema_drift=_drift(report.schema_drift),
    )


def entity_dependencies(entity: EntityDefinition) -> EntityDependenciesRead:
    return EntityDependenciesRead(
        entity=entity.name,
        table=entity.table,
        id_column=entity.id_column,
        soft_status_columns=list(entity.soft_status_columns),
        dependencies=[
            DependencyEdgeRead(order=index, **edge.as_dict())
            for index, edge in enumerate(entity.dependents, start=1)
        ],
    )

"""Entry point for deletion requests: blocking check, cascade or root-only delete, soft fallback."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.services.blocking_check import BlockingCheckEvaluator, BlockingReport
from app.services.cascade_errors import (
    BlockedByDependentsError,
    CascadeIncompleteError,
    RecordNotFoundError,
)
from app.services.cascade_executor import CascadeExecutor, DeletionSummary
from app.services.cascade_statements import build_root_select
from app.services.dependency_graph import DependencyGraph, EntityDefinition, get_dependency_graph
from app.services.dependency_resolver import CascadePlan, DependencyResolver
from app.services.schema_catalog import SchemaCatalog

logger = logging.getLogger(__name__)


class CascadeDeletionService:
    def __init__(
        self,
        db: Session,
        graph: Optional[DependencyGraph] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.graph = graph or get_dependency_graph()
        self.settings = settings or get_settings()

    def entity(self, entity_name: str) -> EntityDefinition:
        return self.graph.get(entity_name)

    def _resolver(self) -> DependencyResolver:
        return DependencyResolver(self.graph, SchemaCatalog(self.db.connection()))

    def resolve(self, entity_name: str, record_id: str) -> CascadePlan:
        return self._resolver().resolve(entity_name, record_id)

    def check_blocking(self, entity_name: str, record_id: str) -> BlockingReport:
        resolver = self._resolver()
        return BlockingCheckEvaluator(self.db, resolver).check_blocking(entity_name, record_id)

    def preview(self, entity_name: str, record_id: str) -> BlockingReport:
        """Blocking check for an existing record, without attempting the delete."""

        entity = self.entity(entity_name)
        row = self.db.execute(build_root_select(entity, record_id, lock=False)).first()
        if row is None:
            raise RecordNotFoundError(entity.name, record_id)
        return self.check_blocking(entity_name, record_id)

    def delete(self, entity_name: str, record_id: str, cascade: bool = False) -> DeletionSummary:
        entity = self.entity(entity_name)
        resolver = self._resolver()
        plan = resolver.resolve(entity.name, record_id)
        executor = CascadeExecutor(self.db)

        if not cascade and self.settings.cascade_auto_nullify and entity.auto_cascade_safe:
            logger.debug("Auto-cascading %s %s: every dependent is unlinked, none removed", entity.name, record_id)
            cascade = True

        if cascade:
            return executor.execute(plan)

        report = BlockingCheckEvaluator(self.db, resolver).evaluate(plan)
        if report.blocked:
            self.db.rollback()
            raise BlockedByDependentsError(entity.name, record_id, report.dependents)

        root_only = CascadePlan(entity=entity, record_id=record_id, schema_drift=plan.schema_drift)
        try:
            return executor.execute(root_only)
        except CascadeIncompleteError:
            if not self.settings.soft_delete_fallback:
                raise
            # the executor rolled back, so inspect on the new transaction's connection
            summary = executor.soft_delete(entity, record_id, SchemaCatalog(self.db.connection()))
            if summary is None:
                raise
            return summary

from app.schemas.deletion import (
    BlockedDependentsRead,
    BlockingDependentRead,
    DeletionResultRead,
    DependencyEdgeRead,
    DependencyGraphRead,
    DependencyOrderItem,
    DependencyPreviewRead,
    EntityDependenciesRead,
    EntitySummaryRead,
    SchemaDriftRead,
)

__all__ = [
    "BlockedDependentsRead",
    "BlockingDependentRead",
    "DeletionResultRead",
    "DependencyEdgeRead",
    "DependencyGraphRead",
    "DependencyOrderItem",
    "DependencyPreviewRead",
    "EntityDependenciesRead",
    "EntitySummaryRead",
    "SchemaDriftRead",
]

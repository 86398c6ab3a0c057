from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class BlockingDependentRead(CamelModel):
    table: str
    column: str
    count: int
    via: List[str] = Field(default_factory=list)
    action: str = "delete"


class SchemaDriftRead(CamelModel):
    entity: str
    table: str
    column: str
    missing: str
    reason: str


class DeletionResultRead(CamelModel):
    message: str
    summary: Dict[str, int] = Field(default_factory=dict)
    deleted: Dict[str, int] = Field(default_factory=dict)
    nullified: Dict[str, int] = Field(default_factory=dict)
    total_affected: int = Field(alias="totalAffected")
    deleted_record: Dict[str, Any] = Field(alias="deletedRecord")
    soft_deleted: bool = Field(default=False, alias="softDeleted")
    field: Optional[str] = None
    value: Any = None
    schema_drift: List[SchemaDriftRead] = Field(default_factory=list, alias="schemaDrift")


class BlockedDependentsRead(CamelModel):
    blocked: bool = True
    error: str = "BlockedByDependents"
    message: str
    entity: str
    record_id: str = Field(alias="recordId")
    dependents: List[BlockingDependentRead] = Field(default_factory=list)
    cascade_option: bool = Field(default=True, alias="cascadeOption")


class DependencyPreviewRead(CamelModel):
    entity: str
    record_id: str = Field(alias="recordId")
    blocked: bool
    total: int
    dependents: List[BlockingDependentRead] = Field(default_factory=list)
    schema_drift: List[SchemaDriftRead] = Field(default_factory=list, alias="schemaDrift")


class DependencyEdgeRead(CamelModel):
    order: int
    table: str
    column: str
    via: List[str] = Field(default_factory=list)
    action: str
    optional: bool = False


class EntitySummaryRead(CamelModel):
    key: str
    label: Optional[str] = None
    table: str
    dependency_count: int


class EntityDependenciesRead(CamelModel):
    entity: str
    table: str
    id_column: str
    soft_status_columns: List[str] = Field(default_factory=list)
    dependencies: List[DependencyEdgeRead] = Field(default_factory=list)


class DependencyGraphRead(CamelModel):
    version: str
    entity_count: int
    edge_count: int


class DependencyOrderItem(BaseModel):
    id: str
    name: str
    order: int

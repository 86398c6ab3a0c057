from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


class CascadeError(Exception):
    """Base class for failures raised by the cascading-deletion engine."""


class GraphValidationError(CascadeError):
    """Raised when a dependency graph fails validation and must not be served."""

    def __init__(self, problems: Sequence[str]):
        self.problems = tuple(problems)
        super().__init__("; ".join(self.problems) or "Dependency graph is invalid")


class UnknownEntityError(CascadeError):
    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"Unknown entity: {entity}")


class RecordNotFoundError(CascadeError):
    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"Record {record_id} not found in {entity}")


class BlockedByDependentsError(CascadeError):
    """A non-cascade delete was attempted against a record that still has dependents."""

    def __init__(self, entity: str, record_id: str, dependents: Sequence["BlockingDependent"]):
        self.entity = entity
        self.record_id = record_id
        self.dependents = tuple(dependents)
        details = ", ".join(dep.describe() for dep in self.dependents)
        super().__init__(f"Cannot delete record because it is referenced by: {details}")


class CascadeIncompleteError(CascadeError):
    """A foreign key blocked the cascade, so the declared graph is missing an edge."""

    def __init__(
        self,
        entity: str,
        record_id: str,
        *,
        table: Optional[str] = None,
        constraint: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.entity = entity
        self.record_id = record_id
        self.table = table
        self.constraint = constraint
        self.detail = detail
        super().__init__(
            f"Deleting {entity} {record_id} was blocked by an undeclared reference"
            + (f" from {table}" if table else "")
        )


class DependencyCheckError(CascadeError):
    """A dependency count failed; an incomplete report is never returned."""

    def __init__(self, entity: str, table: str, column: str):
        self.entity = entity
        self.table = table
        self.column = column
        super().__init__(f"Could not check dependency {table}.{column} for {entity}")


@dataclass(frozen=True)
class SchemaDrift:
    """An edge the live schema cannot satisfy; the edge is skipped, not fatal."""

    entity: str
    table: str
    column: str
    missing: str
    reason: str

    def as_dict(self) -> dict[str, str]:
        return {
            "entity": self.entity,
            "table": self.table,
            "column": self.column,
            "missing": self.missing,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class BlockingDependent:
    table: str
    column: str
    count: int
    via: tuple[str, ...] = ()
    action: str = "delete"

    def describe(self) -> str:
        text = f"{self.count} record(s) in {self.table}.{self.column}"
        if self.via:
            text += " via " + " -> ".join(self.via)
        return text

    def as_dict(self) -> dict[str, object]:
        return {
            "table": self.table,
            "column": self.column,
            "count": self.count,
            "via": list(self.via),
            "action": self.action,
        }

"""Dependency graph model, loader and validator for the cascading-deletion engine.

The graph maps every deletable entity to the ordered edges that must be resolved before one of
its rows can be removed. Edges are declared leaf-first and every chained edge spells out the
tables it joins through; nothing here discovers foreign keys from the database catalogue.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence

import yaml

from app.config import get_settings
from app.constants import dependency_graph as catalogue
from app.services.cascade_errors import GraphValidationError, UnknownEntityError
from app.services.dag_builder import DAGBuilder

logger = logging.getLogger(__name__)

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class EdgeAction(str, Enum):
    DELETE = "delete"
    NULLIFY = "nullify"


@dataclass(frozen=True)
class ChainHop:
    """One intermediate table: ``table.column`` references the next hop (or the root)."""

    table: str
    column: str
    id_column: str = "id"

    @property
    def label(self) -> str:
        return f"{self.table}.{self.column}"


@dataclass(frozen=True)
class DependencyEdge:
    table: str
    column: str
    via: tuple[ChainHop, ...] = ()
    action: EdgeAction = EdgeAction.DELETE
    optional: bool = False

    @property
    def path(self) -> tuple[tuple[str, str], ...]:
        return ((self.table, self.column),) + self.via_path

    @property
    def via_path(self) -> tuple[tuple[str, str], ...]:
        return tuple((hop.table, hop.column) for hop in self.via)

    @property
    def via_labels(self) -> tuple[str, ...]:
        return tuple(hop.label for hop in self.via)

    def referenced_table(self, root_table: str) -> str:
        return self.via[0].table if self.via else root_table

    def describe(self) -> str:
        target = f"{self.table}.{self.column}"
        if not self.via:
            return target
        return f"{target} via {' -> '.join(self.via_labels)}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "column": self.column,
            "via": list(self.via_labels),
            "action": self.action.value,
            "optional": self.optional,
        }


@dataclass(frozen=True)
class EntityDefinition:
    name: str
    table: str
    id_column: str = "id"
    label: str | None = None
    soft_status_columns: tuple[str, ...] = ()
    dependents: tuple[DependencyEdge, ...] = ()

    @property
    def auto_cascade_safe(self) -> bool:
        """Entities whose every dependent is merely unlinked lose no business rows."""
        return bool(self.dependents) and all(
            edge.action is EdgeAction.NULLIFY for edge in self.dependents
        )


@dataclass(frozen=True)
class DependencyGraph:
    version: str
    entities: Mapping[str, EntityDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entities", MappingProxyType(dict(self.entities)))

    def __contains__(self, name: object) -> bool:
        return name in self.entities

    def __iter__(self) -> Iterator[EntityDefinition]:
        return iter(self.entities.values())

    def get(self, name: str) -> EntityDefinition:
        try:
            return self.entities[name]
        except KeyError:
            raise UnknownEntityError(name) from None

    @property
    def edge_count(self) -> int:
        return sum(len(entity.dependents) for entity in self.entities.values())

    def delete_arcs(self) -> set[tuple[str, str]]:
        """``(dependent, referenced)`` table pairs implied by every ``delete`` edge."""
        arcs: set[tuple[str, str]] = set()
        for entity in self.entities.values():
            for edge in entity.dependents:
                if edge.action is EdgeAction.DELETE:
                    arcs.add((edge.table, edge.referenced_table(entity.table)))
        return arcs

    def tables(self) -> set[str]:
        names: set[str] = set()
        for entity in self.entities.values():
            names.add(entity.table)
            for edge in entity.dependents:
                names.add(edge.table)
                names.update(hop.table for hop in edge.via)
        return names


# --- Expansion of the authored catalogue ------------------------------------


def catalogue_delete_arcs(references: Mapping[str, Sequence[tuple[str, str, str]]]) -> set[tuple[str, str]]:
    return {
        (table, target)
        for target, refs in references.items()
        for table, _column, action in refs
        if action == EdgeAction.DELETE.value
    }


def _expand_references(
    target: str,
    references: Mapping[str, Sequence[tuple[str, str, str]]],
    id_columns: Mapping[str, str],
    optional_tables: frozenset[str],
    via: tuple[ChainHop, ...] = (),
    trail: tuple[str, ...] = (),
) -> Iterator[DependencyEdge]:
    for table, column, action in references.get(target, ()):
        edge_action = EdgeAction(action)
        if edge_action is EdgeAction.DELETE:
            if table in trail or table == target:
                raise GraphValidationError(
                    [f"Deleting {table} would recurse through {' -> '.join(trail + (target,))}"]
                )
            hop = ChainHop(table=table, column=column, id_column=id_columns.get(table, "id"))
            yield from _expand_references(
                table,
                references,
                id_columns,
                optional_tables,
                via=(hop,) + via,
                trail=trail + (target,),
            )
        yield DependencyEdge(
            table=table,
            column=column,
            via=via,
            action=edge_action,
            optional=table in optional_tables,
        )


def build_default_graph() -> DependencyGraph:
    """Expand the authored relationship catalogue into per-entity, leaf-first edge lists."""

    references = catalogue.TABLE_REFERENCES
    try:
        DAGBuilder(catalogue_delete_arcs(references)).build_table_order()
    except ValueError as exc:
        raise GraphValidationError([str(exc)]) from exc

    id_columns = {name: "id" for name in catalogue.ENTITY_LABELS}
    entities = {}
    for name, label in catalogue.ENTITY_LABELS.items():
        entities[name] = EntityDefinition(
            name=name,
            table=name,
            id_column=id_columns[name],
            label=label,
            soft_status_columns=catalogue.DEFAULT_SOFT_STATUS_COLUMNS,
            dependents=tuple(
                _expand_references(name, references, id_columns, catalogue.OPTIONAL_TABLES)
            ),
        )

    graph = DependencyGraph(version=str(catalogue.GRAPH_VERSION), entities=entities)
    validate_graph(graph)
    return graph


# --- YAML representation ----------------------------------------------------


def _parse_hop(raw: Any, entity: str) -> tuple[str, str]:
    if not isinstance(raw, str) or raw.count(".") != 1:
        raise GraphValidationError([f"{entity}: chain hop {raw!r} must look like 'table.column'"])
    table, column = (part.strip() for part in raw.split("."))
    return table, column


def graph_from_mapping(data: Mapping[str, Any]) -> DependencyGraph:
    if not isinstance(data, Mapping) or not isinstance(data.get("entities"), Mapping):
        raise GraphValidationError(["Graph document must contain an 'entities' mapping"])

    raw_entities: Mapping[str, Any] = data["entities"]
    malformed = [
        f"{name}: entity definition must be a mapping"
        for name, spec in raw_entities.items()
        if spec is not None and not isinstance(spec, Mapping)
    ]
    if malformed:
        raise GraphValidationError(malformed)
    id_columns = {
        (spec or {}).get("table", name): (spec or {}).get("id_column", "id")
        for name, spec in raw_entities.items()
    }

    entities: dict[str, EntityDefinition] = {}
    for name, spec in raw_entities.items():
        spec = spec or {}
        edges = []
        for raw_edge in spec.get("dependents") or ():
            if not isinstance(raw_edge, Mapping):
                raise GraphValidationError([f"{name}: dependent {raw_edge!r} must be a mapping"])
            try:
                action = EdgeAction(str(raw_edge.get("action", EdgeAction.DELETE.value)).lower())
            except ValueError as exc:
                raise GraphValidationError(
                    [f"{name}: unsupported action {raw_edge.get('action')!r}"]
                ) from exc
            hops = tuple(
                ChainHop(table=table, column=column, id_column=id_columns.get(table, "id"))
                for table, column in (_parse_hop(raw, name) for raw in raw_edge.get("via") or ())
            )
            try:
                edges.append(
                    DependencyEdge(
                        table=raw_edge["table"],
                        column=raw_edge["column"],
                        via=hops,
                        action=action,
                        optional=bool(raw_edge.get("optional", False)),
                    )
                )
            except KeyError as exc:
                raise GraphValidationError([f"{name}: dependent is missing {exc.args[0]!r}"]) from exc

        entities[name] = EntityDefinition(
            name=name,
            table=spec.get("table", name),
            id_column=spec.get("id_column", "id"),
            label=spec.get("label"),
            soft_status_columns=tuple(spec.get("soft_status_columns") or ()),
            dependents=tuple(edges),
        )

    graph = DependencyGraph(version=str(data.get("version", "1")), entities=entities)
    validate_graph(graph)
    return graph


def graph_to_mapping(graph: DependencyGraph) -> dict[str, Any]:
    return {
        "version": graph.version,
        "entities": {
            entity.name: {
                "table": entity.table,
                "id_column": entity.id_column,
                "label": entity.label,
                "soft_status_columns": list(entity.soft_status_columns),
                "dependents": [edge.as_dict() for edge in entity.dependents],
            }
            for entity in graph
        },
    }


def load_graph_file(path: str | Path) -> DependencyGraph:
    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise GraphValidationError([f"{path}: not a valid YAML document ({exc})"]) from exc
    return graph_from_mapping(data or {})


# --- Validation -------------------------------------------------------------


def _identifier_problems(entity: EntityDefinition) -> Iterator[str]:
    names = [entity.table, entity.id_column, *entity.soft_status_columns]
    for edge in entity.dependents:
        names.extend([edge.table, edge.column])
        for hop in edge.via:
            names.extend([hop.table, hop.column, hop.id_column])
    for name in names:
        if not isinstance(name, str) or not _IDENTIFIER_PATTERN.match(name):
            yield f"{entity.name}: invalid identifier {name!r}"


def _ends_with(path: Sequence[tuple[str, str]], suffix: Sequence[tuple[str, str]]) -> bool:
    return len(suffix) <= len(path) and tuple(path[len(path) - len(suffix):]) == tuple(suffix)


def _ordering_problems(entity: EntityDefinition) -> Iterator[str]:
    seen: dict[tuple[tuple[str, str], ...], int] = {}
    for index, edge in enumerate(entity.dependents):
        path = edge.path
        if len(set(path)) != len(path):
            yield f"{entity.name}: {edge.describe()} repeats a hop"
        if path in seen:
            yield f"{entity.name}: {edge.describe()} is declared twice"
        seen.setdefault(path, index)

    edges = entity.dependents
    for reader_index, reader in enumerate(edges):
        reader_via = reader.via_path
        if not reader_via:
            continue
        for writer in edges[:reader_index]:
            if _ends_with(reader_via, writer.path):
                yield (
                    f"{entity.name}: {reader.describe()} reads rows that "
                    f"{writer.describe()} already {writer.action.value}s; declare it earlier"
                )


def graph_problems(graph: DependencyGraph) -> list[str]:
    problems: list[str] = []
    for entity in graph:
        problems.extend(_identifier_problems(entity))
        problems.extend(_ordering_problems(entity))
    try:
        DAGBuilder(graph.delete_arcs(), graph.tables()).build_table_order()
    except ValueError as exc:
        problems.append(str(exc))
    return problems


def validate_graph(graph: DependencyGraph) -> DependencyGraph:
    problems = graph_problems(graph)
    if problems:
        raise GraphValidationError(problems)
    return graph


@lru_cache()
def get_dependency_graph() -> DependencyGraph:
    settings = get_settings()
    if settings.dependency_graph_path:
        graph = load_graph_file(settings.dependency_graph_path)
        source = settings.dependency_graph_path
    else:
        graph = build_default_graph()
        source = "built-in catalogue"
    logger.info(
        "Dependency graph v%s accepted from %s: %d entities, %d edges",
        graph.version,
        source,
        len(graph.entities),
        graph.edge_count,
    )
    return graph

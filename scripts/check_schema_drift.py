"""Report dependency edges the database at DATABASE_URL cannot satisfy."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

_ROOT_DIR = Path(__file__).resolve().parents[1]
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

from app.database import engine  # noqa: E402
from app.services.dependency_graph import get_dependency_graph  # noqa: E402
from app.services.dependency_resolver import DependencyResolver  # noqa: E402
from app.services.schema_catalog import SchemaCatalog  # noqa: E402


def find_drift(entities: list[str] | None = None) -> dict[str, list[str]]:
    graph = get_dependency_graph()
    names = entities or sorted(graph.entities)
    report: dict[str, list[str]] = {}
    with engine.connect() as connection:
        resolver = DependencyResolver(graph, SchemaCatalog(connection))
        for name in names:
            # The record id is never bound; resolve only inspects the catalogue.
            plan = resolver.resolve(name, "")
            if plan.schema_drift:
                report[name] = [
                    f"{drift.table}.{drift.column}: {drift.missing} ({drift.reason})"
                    for drift in plan.schema_drift
                ]
    return report


def main() -> None:
    parser = argparse.ArgumentParser(description="List dependency edges missing from the live schema.")
    parser.add_argument("entities", nargs="*", help="Entities to check; all when omitted")

    args = parser.parse_args()
    report = find_drift(args.entities or None)
    if not report:
        print("No schema drift detected.")
        return

    for entity, problems in report.items():
        print(f"{entity}:")
        for problem in problems:
            print(f"  - {problem}")
    sys.exit(1)


if __name__ == "__main__":
    main()

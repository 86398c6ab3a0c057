"""Write the expanded dependency graph as YAML, in the format DEPENDENCY_GRAPH_PATH accepts."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

_ROOT_DIR = Path(__file__).resolve().parents[1]
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

from app.services.dependency_graph import build_default_graph, graph_to_mapping, load_graph_file  # noqa: E402


def export_graph(output: Path | None, source: Path | None = None) -> str:
    graph = load_graph_file(source) if source else build_default_graph()
    document = yaml.safe_dump(graph_to_mapping(graph), sort_keys=False, default_flow_style=False)
    if output is not None:
        output.write_text(document, encoding="utf-8")
    return document


def main() -> None:
    parser = argparse.ArgumentParser(description="Export the cascade dependency graph as YAML.")
    parser.add_argument("--output", type=Path, help="File to write; prints to stdout when omitted")
    parser.add_argument(
        "--source",
        type=Path,
        help="Re-validate and normalise an existing graph file instead of the built-in catalogue",
    )

    args = parser.parse_args()
    document = export_graph(args.output, args.source)
    if args.output is None:
        print(document, end="")
    else:
        print(f"Wrote dependency graph to {args.output}")


if __name__ == "__main__":
    main()

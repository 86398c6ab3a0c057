from __future__ import annotations

from collections import defaultdict, deque
from typing import Iterable, List, Tuple


class DAGBuilder:
    """Utility class that produces topological orders for table dependencies.

    Arcs are ``(predecessor, successor)`` pairs of table names: rows of the predecessor
    must be removed before rows of the successor can be.
    """

    def __init__(self, arcs: Iterable[Tuple[str, str]], tables: Iterable[str] = ()):
        self.arcs = set(arcs)
        self.tables = set(tables)

    def build_table_order(self) -> List[dict]:
        names = set(self.tables)
        for predecessor, successor in self.arcs:
            names.add(predecessor)
            names.add(successor)
        nodes = [(name, name) for name in sorted(names)]
        return self._build_order(nodes, self.arcs)

    def _build_order(
        self,
        nodes: Iterable[Tuple[str, str]],
        edges: Iterable[Tuple[str, str]],
    ) -> List[dict]:
        indegree: dict[str, int] = {}
        name_map: dict[str, str] = {}
        adjacency: dict[str, set[str]] = defaultdict(set)

        for node_id, name in nodes:
            indegree[node_id] = 0
            name_map[node_id] = name

        for predecessor_id, successor_id in edges:
            if predecessor_id == successor_id:
                continue
            if successor_id not in indegree:
                # Detached dependency reference; skip to keep builder robust
                continue
            if successor_id not in adjacency[predecessor_id]:
                adjacency[predecessor_id].add(successor_id)
                indegree[successor_id] = indegree.get(successor_id, 0) + 1

        queue: deque[str] = deque(
            sorted((node_id for node_id, deg in indegree.items() if deg == 0), key=lambda x: name_map[x])
        )
        order: List[dict] = []
        processed = 0

        while queue:
            current = queue.popleft()
            order.append({"id": current, "name": name_map[current], "order": processed})
            processed += 1

            for successor in sorted(adjacency[current]):
                indegree[successor] -= 1
                if indegree[successor] == 0:
                    queue.append(successor)

        if processed != len(indegree):
            blocked = sorted(node_id for node_id, deg in indegree.items() if deg > 0)
            raise ValueError(
                "Dependency graph contains a cycle or unresolved references: " + ", ".join(blocked)
            )

        return order

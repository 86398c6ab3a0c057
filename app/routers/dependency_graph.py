from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import DependencyGraphRead, DependencyOrderItem
from app.services import DAGBuilder, DependencyGraph, get_dependency_graph

router = APIRouter(prefix="/dependency-graph", tags=["Dependency Graph"])


def _build_response(items: list[dict]) -> list[DependencyOrderItem]:
    return [DependencyOrderItem(**item) for item in items]


@router.get("", response_model=DependencyGraphRead)
def get_graph_summary(graph: DependencyGraph = Depends(get_dependency_graph)) -> DependencyGraphRead:
    return DependencyGraphRead(
        version=graph.version,
        entity_count=len(graph.entities),
        edge_count=graph.edge_count,
    )


@router.get("/table-order", response_model=list[DependencyOrderItem])
def get_table_order(graph: DependencyGraph = Depends(get_dependency_graph)) -> list[DependencyOrderItem]:
    builder = DAGBuilder(graph.delete_arcs(), graph.tables())
    try:
        order = builder.build_table_order()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _build_response(order)

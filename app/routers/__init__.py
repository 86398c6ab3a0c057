from fastapi import APIRouter

from app.routers import dependency_graph, entity_deletion

api_router = APIRouter()
api_router.include_router(entity_deletion.router)
api_router.include_router(dependency_graph.router)

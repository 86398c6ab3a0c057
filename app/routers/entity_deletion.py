from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import (
    DeletionResultRead,
    DependencyPreviewRead,
    EntityDependenciesRead,
    EntitySummaryRead,
)
from app.services import CascadeDeletionService
from app.services.cascade_errors import (
    BlockedByDependentsError,
    CascadeIncompleteError,
    DependencyCheckError,
    RecordNotFoundError,
    UnknownEntityError,
)
from app.services.deletion_report import (
    blocked_result,
    deletion_result,
    dependency_preview,
    entity_dependencies,
)

router = APIRouter(prefix="/entities", tags=["Entity Deletion"])


def get_cascade_deletion_service(db: Session = Depends(get_db)) -> CascadeDeletionService:
    return CascadeDeletionService(db)


def _unknown_entity(exc: UnknownEntityError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "UnknownEntity", "entity": exc.entity, "message": str(exc)},
    )


def _not_found(exc: RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _check_failed(exc: DependencyCheckError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "DependencyCheckFailed",
            "message": str(exc),
            "table": exc.table,
            "column": exc.column,
        },
    )


@router.get("", response_model=list[EntitySummaryRead])
def list_entities(
    service: CascadeDeletionService = Depends(get_cascade_deletion_service),
) -> list[EntitySummaryRead]:
    return [
        EntitySummaryRead(
            key=entity.name,
            label=entity.label,
            table=entity.table,
            dependency_count=len(entity.dependents),
        )
        for entity in sorted(service.graph, key=lambda item: item.name)
    ]


@router.get("/{entity_name}/dependencies", response_model=EntityDependenciesRead)
def get_entity_dependencies(
    entity_name: str,
    service: CascadeDeletionService = Depends(get_cascade_deletion_service),
) -> EntityDependenciesRead:
    try:
        entity = service.entity(entity_name)
    except UnknownEntityError as exc:
        raise _unknown_entity(exc) from exc
    return entity_dependencies(entity)


@router.get("/{entity_name}/{record_id}/dependents", response_model=DependencyPreviewRead)
def preview_dependents(
    entity_name: str,
    record_id: str,
    service: CascadeDeletionService = Depends(get_cascade_deletion_service),
) -> DependencyPreviewRead:
    try:
        report = service.preview(entity_name, record_id)
    except UnknownEntityError as exc:
        raise _unknown_entity(exc) from exc
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except DependencyCheckError as exc:
        raise _check_failed(exc) from exc
    return dependency_preview(report)


@router.delete(
    "/{entity_name}/{record_id}",
    response_model=DeletionResultRead,
    responses={
        status.HTTP_409_CONFLICT: {"description": "Blocked by dependents or cascade incomplete"},
    },
)
def delete_entity_record(
    entity_name: str,
    record_id: str,
    cascade: bool = Query(False, description="Delete or unlink every dependent before the record"),
    service: CascadeDeletionService = Depends(get_cascade_deletion_service),
):
    try:
        summary = service.delete(entity_name, record_id, cascade=cascade)
    except UnknownEntityError as exc:
        raise _unknown_entity(exc) from exc
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except DependencyCheckError as exc:
        raise _check_failed(exc) from exc
    except BlockedByDependentsError as exc:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=blocked_result(exc).model_dump(by_alias=True),
        )
    except CascadeIncompleteError as exc:
        raise HTTPException(
            status_code=service.settings.cascade_incomplete_status_code,
            detail={
                "error": "CascadeIncomplete",
                "message": str(exc),
                "entity": exc.entity,
                "recordId": exc.record_id,
                "table": exc.table,
                "constraint": exc.constraint,
                "detail": exc.detail,
            },
        ) from exc
    return deletion_result(summary)

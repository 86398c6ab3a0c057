import pytest
from sqlalchemy import select

from app.models import Account, Building
from app.services import CascadeDeletionService
from app.services.cascade_errors import CascadeIncompleteError
from app.services.dependency_graph import graph_from_mapping

# Neither entity declares the locations/rooms that reference it, so a root-only delete trips a foreign key.
UNDECLARED_GRAPH = graph_from_mapping(
    {
        "version": "soft",
        "entities": {
            "accounts": {"soft_status_columns": ["status", "is_active"], "dependents": []},
            "buildings": {"soft_status_columns": ["status", "is_active"], "dependents": []},
        },
    }
)


def _service(db_session, settings) -> CascadeDeletionService:
    return CascadeDeletionService(db_session, graph=UNDECLARED_GRAPH, settings=settings)


def test_referenced_record_is_marked_inactive(db_session, settings, building_with_rooms):
    summary = _service(db_session, settings).delete("accounts", "A1")

    assert summary.soft_deleted
    assert summary.soft_field == "status"
    assert summary.soft_value == "inactive"
    assert summary.deleted_record["id"] == "A1"
    assert summary.deleted_record["status"] == "inactive"
    row = db_session.execute(select(Account.status, Account.updated_at).where(Account.id == "A1")).one()
    assert row.status == "inactive"
    assert row.updated_at is not None


def test_fallback_can_be_switched_off(db_session, settings, building_with_rooms):
    settings.soft_delete_fallback = False

    with pytest.raises(CascadeIncompleteError):
        _service(db_session, settings).delete("accounts", "A1")

    status = db_session.execute(select(Account.status).where(Account.id == "A1")).scalar_one()
    assert status == "active"


def test_entities_without_status_columns_still_fail(db_session, settings, building_with_rooms):
    with pytest.raises(CascadeIncompleteError):
        _service(db_session, settings).delete("buildings", "B1")

    assert db_session.execute(select(Building.id)).scalars().all() == ["B1"]


def test_cascade_requests_never_fall_back(db_session, settings, building_with_rooms):
    with pytest.raises(CascadeIncompleteError):
        _service(db_session, settings).delete("accounts", "A1", cascade=True)

    status = db_session.execute(select(Account.status).where(Account.id == "A1")).scalar_one()
    assert status == "active"

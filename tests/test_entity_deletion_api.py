from http import HTTPStatus

from sqlalchemy import func, select

from app.main import app
from app.models import Asset, Building, PartListing
from app.routers.entity_deletion import get_cascade_deletion_service
from app.services import CascadeDeletionService
from app.services.dependency_graph import graph_from_mapping


def test_health_check_is_outside_the_api_prefix(client):
    response = client.get("http://testserver/health")

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"status": "ok"}


def test_blocked_delete_returns_conflict_with_dependents(client, db_session, building_with_rooms):
    response = client.delete("/entities/buildings/B1")

    assert response.status_code == HTTPStatus.CONFLICT
    body = response.json()
    assert body["blocked"] is True
    assert body["cascadeOption"] is True
    assert body["error"] == "BlockedByDependents"
    assert body["recordId"] == "B1"
    assert "Cannot delete record" in body["message"]
    counts = {(item["table"], item["column"]): item["count"] for item in body["dependents"]}
    assert counts == {("building_rooms", "building_id"): 2, ("assets", "room_id"): 6}
    assert db_session.execute(select(func.count()).select_from(Asset)).scalar_one() == 6


def test_cascade_delete_returns_summary_and_deleted_record(client, db_session, building_with_rooms):
    response = client.delete("/entities/buildings/B1", params={"cascade": "true"})

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body["summary"] == {"assets": 6, "building_rooms": 2}
    assert body["deleted"] == {"assets": 6, "building_rooms": 2}
    assert body["nullified"] == {}
    assert body["totalAffected"] == 9
    assert body["deletedRecord"]["id"] == "B1"
    assert body["softDeleted"] is False
    assert body["schemaDrift"] == []
    assert db_session.execute(select(func.count()).select_from(Building)).scalar_one() == 0


def test_cascade_delete_nullifies_parts(client, db_session, manufacturer_with_parts):
    response = client.delete("/entities/manufacturers/M1?cascade=true")

    assert response.status_code == HTTPStatus.OK
    assert response.json()["nullified"] == {"parts_listing": 2}
    assert db_session.execute(select(PartListing.manufacturer_id)).scalars().all() == [None, None]


def test_unknown_entity_is_a_bad_request(client):
    response = client.delete("/entities/spaceships/X1")

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()["detail"]["error"] == "UnknownEntity"


def test_missing_record_is_not_found(client, building_with_rooms):
    response = client.delete("/entities/buildings/B404", params={"cascade": "true"})

    assert response.status_code == HTTPStatus.NOT_FOUND


def test_incomplete_graph_is_reported_as_conflict(client, db_session, settings, building_with_rooms):
    incomplete = graph_from_mapping({"entities": {"buildings": {"dependents": []}}})
    app.dependency_overrides[get_cascade_deletion_service] = lambda: CascadeDeletionService(
        db_session, graph=incomplete, settings=settings
    )

    response = client.delete("/entities/buildings/B1", params={"cascade": "true"})

    assert response.status_code == HTTPStatus.CONFLICT
    detail = response.json()["detail"]
    assert detail["error"] == "CascadeIncomplete"
    assert detail["recordId"] == "B1"
    assert "FOREIGN KEY" in detail["detail"]


def test_incomplete_graph_status_follows_settings(client, db_session, settings, building_with_rooms):
    settings.cascade_incomplete_status_code = 500
    incomplete = graph_from_mapping({"entities": {"buildings": {"dependents": []}}})
    app.dependency_overrides[get_cascade_deletion_service] = lambda: CascadeDeletionService(
        db_session, graph=incomplete, settings=settings
    )

    response = client.delete("/entities/buildings/B1", params={"cascade": "true"})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json()["detail"]["error"] == "CascadeIncomplete"


def test_soft_delete_fallback_is_reported(client, db_session, settings, building_with_rooms):
    undeclared = graph_from_mapping(
        {"entities": {"accounts": {"soft_status_columns": ["status"], "dependents": []}}}
    )
    app.dependency_overrides[get_cascade_deletion_service] = lambda: CascadeDeletionService(
        db_session, graph=undeclared, settings=settings
    )

    response = client.delete("/entities/accounts/A1")

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body["softDeleted"] is True
    assert body["field"] == "status"
    assert body["value"] == "inactive"
    assert body["totalAffected"] == 0


def test_list_entities(client):
    response = client.get("/entities")

    assert response.status_code == HTTPStatus.OK
    entities = {item["key"]: item for item in response.json()}
    assert entities["buildings"]["label"] == "Buildings"
    assert entities["buildings"]["dependency_count"] > 0
    assert entities["work_order_tasks"]["dependency_count"] == 0


def test_entity_dependencies_are_listed_in_execution_order(client):
    response = client.get("/entities/manufacturers/dependencies")

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body["entity"] == "manufacturers"
    assert body["dependencies"] == [
        {
            "order": 1,
            "table": "parts_listing",
            "column": "manufacturer_id",
            "via": [],
            "action": "nullify",
            "optional": False,
        }
    ]


def test_entity_dependencies_for_unknown_entity(client):
    assert client.get("/entities/spaceships/dependencies").status_code == HTTPStatus.BAD_REQUEST


def test_dependents_preview_does_not_mutate(client, db_session, building_with_rooms):
    response = client.get("/entities/buildings/B1/dependents")

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body["blocked"] is True
    assert body["total"] == 8
    assert body["recordId"] == "B1"
    assert db_session.execute(select(func.count()).select_from(Building)).scalar_one() == 1


def test_dependents_preview_for_missing_record(client, building_with_rooms):
    response = client.get("/entities/buildings/B404/dependents")

    assert response.status_code == HTTPStatus.NOT_FOUND


def test_dependency_graph_summary(client, graph):
    response = client.get("/dependency-graph")

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {
        "version": graph.version,
        "entity_count": len(graph.entities),
        "edge_count": graph.edge_count,
    }


def test_dependency_graph_table_order(client):
    response = client.get("/dependency-graph/table-order")

    assert response.status_code == HTTPStatus.OK
    order = [item["name"] for item in response.json()]
    assert order.index("pou_points") < order.index("building_rooms") < order.index("buildings")
    assert order.index("assets") < order.index("accounts")

import os
import sys
from pathlib import Path

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import Session, sessionmaker

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DATABASE_URL = "sqlite://"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.pop("DEPENDENCY_GRAPH_PATH", None)

from app.config import Settings  # noqa: E402
from app.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import (  # noqa: E402
    Account,
    AccountVendorLink,
    Address,
    Asset,
    AssetCategory,
    AssetMaintenanceProfile,
    AssetSpecification,
    Building,
    BuildingRoom,
    CartridgeComponent,
    ConnectedEquipment,
    Contact,
    ContactEnhanced,
    ContactMembership,
    CustomerCampus,
    CustomerTier1,
    CustomerTier2,
    CustomerTier3,
    EquipmentSpecification,
    FilterInstallation,
    FilterLifespanTracking,
    FilterMaintenanceProfile,
    Floor,
    InstalledCartridge,
    LeakMonitoring,
    Location,
    MaintenanceProfile,
    Manufacturer,
    NsfCertification,
    PartCompatibility,
    PartListing,
    PouPoint,
    PublicAccessPoint,
    ServiceAlert,
    TelemetryReading,
    User,
    UserLink,
    Vendor,
    VendorType,
    WaterFilterProject,
    WaterQualityMetric,
    WorkOrder,
    WorkOrderAsset,
    WorkOrderPart,
    WorkOrderScope,
    WorkOrderTask,
    WorkOrderType,
)
from app.routers.entity_deletion import get_cascade_deletion_service  # noqa: E402
from app.services import CascadeDeletionService  # noqa: E402
from app.services.dependency_graph import build_default_graph  # noqa: E402


def _create_testing_engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    enable_sqlite_foreign_keys(engine)
    return engine


def _create_test_sessionmaker(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture(scope="session")
def graph():
    return build_default_graph()


@pytest.fixture()
def settings() -> Settings:
    return Settings(database_url=TEST_DATABASE_URL)


@pytest.fixture(scope="function")
def engine():
    # A fresh in-memory database per test; the assets/work_orders foreign-key cycle makes
    # drop_all on a shared database unreliable.
    engine = _create_testing_engine()
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    TestingSessionLocal = _create_test_sessionmaker(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def deletion_service(db_session, graph, settings) -> CascadeDeletionService:
    return CascadeDeletionService(db_session, graph=graph, settings=settings)


class PrefixedTestClient(TestClient):
    api_prefix = "/api"

    def request(self, method: str, url: str, *args, **kwargs):  # type: ignore[override]
        if url.startswith("/"):
            url = f"{self.api_prefix}{url}"
        return super().request(method, url, *args, **kwargs)


@pytest.fixture()
def client(db_session: Session, graph, settings) -> Generator[TestClient, None, None]:
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def override_get_service():
        return CascadeDeletionService(db_session, graph=graph, settings=settings)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cascade_deletion_service] = override_get_service

    client = PrefixedTestClient(app)
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_cascade_deletion_service, None)


def _persist(session: Session, *groups) -> None:
    """Insert parents before children; plain foreign keys give the ORM no relationship to sort by."""

    for group in groups:
        session.add_all(group)
        session.flush()
    session.commit()


@pytest.fixture()
def building_with_rooms(db_session: Session) -> dict:
    """Building B1 with two rooms holding three assets each."""

    room_ids = ["R1", "R2"]
    asset_ids = [f"AS{room_id}-{index}" for room_id in room_ids for index in (1, 2, 3)]
    _persist(
        db_session,
        [Account(id="A1", name="Acme Health")],
        [Location(id="L1", name="Main Campus", account_id="A1")],
        [Building(id="B1", name="North Tower", location_id="L1")],
        [BuildingRoom(id=room_id, name=f"Room {room_id}", building_id="B1") for room_id in room_ids],
        [
            Asset(id=asset_id, name=f"Filter {asset_id}", room_id=asset_id[2:4])
            for asset_id in asset_ids
        ],
    )
    return {
        "account_id": "A1",
        "location_id": "L1",
        "building_id": "B1",
        "room_ids": room_ids,
        "asset_ids": asset_ids,
    }


@pytest.fixture()
def manufacturer_with_parts(db_session: Session) -> dict:
    part_ids = ["P1", "P2"]
    _persist(
        db_session,
        [Manufacturer(id="M1", name="PureFlow")],
        [
            PartListing(id=part_id, part_name=f"Cartridge {part_id}", manufacturer_id="M1")
            for part_id in part_ids
        ],
    )
    return {"manufacturer_id": "M1", "part_ids": part_ids}


@pytest.fixture()
def facility_dataset(db_session: Session) -> dict:
    """One row in every table, wired so that account A1 reaches all of them.

    Account A2 owns a second location and asset that no A1 deletion may touch.
    """

    _persist(
        db_session,
        [
            CustomerTier1(id="T1", name="Enterprise"),
            CustomerTier2(id="T2", name="Healthcare"),
            CustomerTier3(id="T3", name="West"),
            VendorType(id="VT1", name="Installer"),
            AssetCategory(id="AC1", name="Filtration"),
            WorkOrderType(id="WT1", name="Install"),
            Manufacturer(id="M1", name="PureFlow"),
            Address(id="AD1", line1="1 Main St", city="Springfield"),
            User(id="U1", name="Dana Admin", email="dana@example.com"),
            Contact(id="C1", name="Front Desk"),
            ContactEnhanced(id="CE1", first_name="Robin"),
            NsfCertification(id="NSF1", standard="NSF/ANSI 53"),
            EquipmentSpecification(id="ES1", name="Flow rate", unit="gpm"),
        ],
        [
            Vendor(id="V1", name="Clear Water Services", vendor_type_id="VT1"),
            MaintenanceProfile(id="MP1", name="Quarterly", asset_category_id="AC1", interval_days=90),
            Account(id="A1", name="Acme Health", tier1_id="T1", tier2_id="T2", tier3_id="T3"),
            Account(id="A2", name="Other Corp"),
            PartListing(id="PL1", part_name="Carbon Block", manufacturer_id="M1", category_id="AC1"),
            PartListing(id="PL2", part_name="Sediment Pre-filter", manufacturer_id="M1"),
        ],
        [
            Location(id="L1", name="Main Campus", account_id="A1", address_id="AD1"),
            Location(id="L2", name="Other Site", account_id="A2"),
            CustomerCampus(id="CC1", name="North Campus", account_id="A1", campus_manager_id="CE1"),
            AccountVendorLink(id="AVL1", account_id="A1", vendor_id="V1"),
            UserLink(id="UL1", user_id="U1", account_id="A1", vendor_id="V1"),
            ContactMembership(id="CM1", contact_id="CE1", account_id="A1", vendor_id="V1"),
            PartCompatibility(id="PC1", part_id="PL1", compatible_with_part_id="PL2"),
            FilterMaintenanceProfile(id="FMP1", part_id="PL1", replacement_interval_days=180),
            CartridgeComponent(id="CCP1", parent_part_id="PL1", name="O-ring"),
            WaterFilterProject(id="WFP1", name="Retrofit", account_id="A1"),
        ],
        [Building(id="B1", name="North Tower", location_id="L1")],
        [Floor(id="F1", name="Level 1", building_id="B1")],
        [BuildingRoom(id="R1", name="Break Room", building_id="B1", floor_id="F1")],
        [PouPoint(id="P1", name="Sink", room_id="R1")],
        [
            Asset(
                id="AS1",
                name="Bottle Filler",
                account_id="A1",
                location_id="L1",
                building_id="B1",
                floor_id="F1",
                room_id="R1",
                pou_point_id="P1",
                part_id="PL1",
            ),
            Asset(id="AS2", name="Under-sink Unit", account_id="A1", room_id="R1"),
            Asset(id="AS3", name="Lobby Fountain", account_id="A2", location_id="L2", part_id="PL2"),
        ],
        [
            FilterInstallation(
                id="FI1",
                account_id="A1",
                location_id="L1",
                building_id="B1",
                floor_id="F1",
                room_id="R1",
                asset_id="AS2",
                project_id="WFP1",
                filter_model_id="PL1",
                installed_by="V1",
            )
        ],
        [
            WorkOrder(
                id="WO1",
                title="Install filter",
                account_id="A1",
                vendor_id="V1",
                work_order_type_id="WT1",
                filter_installation_id="FI1",
            )
        ],
    )

    asset = db_session.get(Asset, "AS1")
    asset.installation_work_order_id = "WO1"
    _persist(
        db_session,
        [
            AssetSpecification(id="ASP1", asset_id="AS1", spec_id="ES1", value="1.5"),
            AssetMaintenanceProfile(id="AMP1", asset_id="AS1", profile_id="MP1"),
            ConnectedEquipment(id="CEQ1", filter_asset_id="AS2", connected_asset_id="AS1"),
            TelemetryReading(id="TR1", asset_id="AS1", metric="flow"),
            PublicAccessPoint(id="PAP1", name="Hall fountain", asset_id="AS1", room_id="R1"),
            InstalledCartridge(id="IC1", filter_installation_id="FI1", asset_id="AS1"),
            FilterLifespanTracking(id="FLT1", filter_installation_id="FI1"),
            WaterQualityMetric(id="WQM1", filter_installation_id="FI1", metric="tds"),
            LeakMonitoring(id="LM1", filter_installation_id="FI1", sensor_state="dry"),
            ServiceAlert(
                id="SA1",
                message="Filter due",
                asset_id="AS1",
                location_id="L1",
                acknowledged_by="CE1",
                work_order_created="WO1",
            ),
            WorkOrderTask(id="WOT1", work_order_id="WO1", description="Flush lines"),
            WorkOrderPart(
                id="WOP1",
                work_order_id="WO1",
                part_id="PL1",
                pou_point_id="P1",
                installed_as_asset_id="AS2",
            ),
            WorkOrderAsset(id="WOA1", work_order_id="WO1", asset_id="AS1"),
            WorkOrderScope(id="WOS1", work_order_id="WO1", building_id="B1", floor_id="F1", room_id="R1"),
        ],
    )
    return {
        "customer_tier1": "T1",
        "customer_tier2": "T2",
        "customer_tier3": "T3",
        "vendor_types": "VT1",
        "asset_categories": "AC1",
        "work_order_types": "WT1",
        "manufacturers": "M1",
        "addresses": "AD1",
        "users": "U1",
        "contacts": "C1",
        "contacts_enhanced": "CE1",
        "nsf_certifications": "NSF1",
        "equipment_specifications": "ES1",
        "vendors": "V1",
        "maintenance_profiles": "MP1",
        "accounts": "A1",
        "parts_listing": "PL1",
        "locations": "L1",
        "customer_campuses": "CC1",
        "part_compatibility": "PC1",
        "cartridge_components": "CCP1",
        "water_filter_projects": "WFP1",
        "buildings": "B1",
        "floors": "F1",
        "building_rooms": "R1",
        "pou_points": "P1",
        "assets": "AS1",
        "filter_installations": "FI1",
        "work_orders": "WO1",
        "asset_specifications": "ASP1",
        "asset_maintenance_profiles": "AMP1",
        "connected_equipment": "CEQ1",
        "telemetry_readings": "TR1",
        "public_access_points": "PAP1",
        "installed_cartridges": "IC1",
        "filter_lifespan_tracking": "FLT1",
        "water_quality_metrics": "WQM1",
        "leak_monitoring": "LM1",
        "service_alerts": "SA1",
        "work_order_tasks": "WOT1",
        "work_order_parts": "WOP1",
        "work_order_assets": "WOA1",
        "work_order_scopes": "WOS1",
    }

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _id_column() -> Mapped[str]:
    return mapped_column(String(36), primary_key=True, default=_new_id)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )


# --- Lookup / master data -------------------------------------------------


class CustomerTier1(Base, TimestampMixin):
    __tablename__ = "customer_tier1"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class CustomerTier2(Base, TimestampMixin):
    __tablename__ = "customer_tier2"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class CustomerTier3(Base, TimestampMixin):
    __tablename__ = "customer_tier3"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class VendorType(Base, TimestampMixin):
    __tablename__ = "vendor_types"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class AssetCategory(Base, TimestampMixin):
    __tablename__ = "asset_categories"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class WorkOrderType(Base, TimestampMixin):
    __tablename__ = "work_order_types"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Manufacturer(Base, TimestampMixin):
    __tablename__ = "manufacturers"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    website: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class Address(Base, TimestampMixin):
    __tablename__ = "addresses"

    id: Mapped[str] = _id_column()
    line1: Mapped[str] = mapped_column(String(300), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, unique=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class Contact(Base, TimestampMixin):
    __tablename__ = "contacts"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)


class ContactEnhanced(Base, TimestampMixin):
    __tablename__ = "contacts_enhanced"

    id: Mapped[str] = _id_column()
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class Vendor(Base, TimestampMixin):
    __tablename__ = "vendors"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    vendor_type_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("vendor_types.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class NsfCertification(Base, TimestampMixin):
    __tablename__ = "nsf_certifications"

    id: Mapped[str] = _id_column()
    standard: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class EquipmentSpecification(Base, TimestampMixin):
    __tablename__ = "equipment_specifications"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)


class MaintenanceProfile(Base, TimestampMixin):
    __tablename__ = "maintenance_profiles"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    asset_category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("asset_categories.id"), nullable=True
    )
    interval_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


# --- Customers and the location hierarchy ---------------------------------


class Account(Base, TimestampMixin):
    __tablename__ = "accounts"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_number: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    tier1_id: Mapped[Optional[str]] = mapped_column(ForeignKey("customer_tier1.id"), nullable=True)
    tier2_id: Mapped[Optional[str]] = mapped_column(ForeignKey("customer_tier2.id"), nullable=True)
    tier3_id: Mapped[Optional[str]] = mapped_column(ForeignKey("customer_tier3.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class Location(Base, TimestampMixin):
    __tablename__ = "locations"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_id: Mapped[Optional[str]] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    address_id: Mapped[Optional[str]] = mapped_column(ForeignKey("addresses.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class Building(Base, TimestampMixin):
    __tablename__ = "buildings"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location_id: Mapped[str] = mapped_column(ForeignKey("locations.id"), nullable=False)


class Floor(Base, TimestampMixin):
    __tablename__ = "floors"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    building_id: Mapped[str] = mapped_column(ForeignKey("buildings.id"), nullable=False)


class BuildingRoom(Base, TimestampMixin):
    __tablename__ = "building_rooms"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    building_id: Mapped[str] = mapped_column(ForeignKey("buildings.id"), nullable=False)
    floor_id: Mapped[Optional[str]] = mapped_column(ForeignKey("floors.id"), nullable=True)


class PouPoint(Base, TimestampMixin):
    __tablename__ = "pou_points"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    room_id: Mapped[str] = mapped_column(ForeignKey("building_rooms.id"), nullable=False)


class CustomerCampus(Base, TimestampMixin):
    __tablename__ = "customer_campuses"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_id: Mapped[str] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    campus_manager_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("contacts_enhanced.id"), nullable=True
    )


class AccountVendorLink(Base, TimestampMixin):
    __tablename__ = "account_vendor_links"

    id: Mapped[str] = _id_column()
    account_id: Mapped[str] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    vendor_id: Mapped[str] = mapped_column(ForeignKey("vendors.id"), nullable=False)


class UserLink(Base, TimestampMixin):
    __tablename__ = "user_links"

    id: Mapped[str] = _id_column()
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    account_id: Mapped[Optional[str]] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    vendor_id: Mapped[Optional[str]] = mapped_column(ForeignKey("vendors.id"), nullable=True)


class ContactMembership(Base, TimestampMixin):
    __tablename__ = "contact_memberships"

    id: Mapped[str] = _id_column()
    contact_id: Mapped[str] = mapped_column(ForeignKey("contacts_enhanced.id"), nullable=False)
    account_id: Mapped[Optional[str]] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    vendor_id: Mapped[Optional[str]] = mapped_column(ForeignKey("vendors.id"), nullable=True)
    role: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)


# --- Parts catalogue -------------------------------------------------------


class PartListing(Base, TimestampMixin):
    __tablename__ = "parts_listing"

    id: Mapped[str] = _id_column()
    part_name: Mapped[str] = mapped_column(String(200), nullable=False)
    manufacturer_part_number: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    manufacturer_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("manufacturers.id"), nullable=True
    )
    category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("asset_categories.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class PartCompatibility(Base, TimestampMixin):
    __tablename__ = "part_compatibility"

    id: Mapped[str] = _id_column()
    part_id: Mapped[str] = mapped_column(ForeignKey("parts_listing.id"), nullable=False)
    compatible_with_part_id: Mapped[str] = mapped_column(
        ForeignKey("parts_listing.id"), nullable=False
    )


class FilterMaintenanceProfile(Base, TimestampMixin):
    __tablename__ = "filter_maintenance_profiles"

    id: Mapped[str] = _id_column()
    part_id: Mapped[str] = mapped_column(ForeignKey("parts_listing.id"), nullable=False)
    replacement_interval_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class CartridgeComponent(Base, TimestampMixin):
    __tablename__ = "cartridge_components"

    id: Mapped[str] = _id_column()
    parent_part_id: Mapped[str] = mapped_column(ForeignKey("parts_listing.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)


# --- Projects, work orders and assets --------------------------------------


class WaterFilterProject(Base, TimestampMixin):
    __tablename__ = "water_filter_projects"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_id: Mapped[str] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="planned")


class WorkOrder(Base, TimestampMixin):
    __tablename__ = "work_orders"

    id: Mapped[str] = _id_column()
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    account_id: Mapped[str] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    vendor_id: Mapped[Optional[str]] = mapped_column(ForeignKey("vendors.id"), nullable=True)
    work_order_type_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("work_order_types.id"), nullable=True
    )
    filter_installation_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("filter_installations.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="open")


class Asset(Base, TimestampMixin):
    __tablename__ = "assets"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    serial_number: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    asset_tag: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    account_id: Mapped[Optional[str]] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    location_id: Mapped[Optional[str]] = mapped_column(ForeignKey("locations.id"), nullable=True)
    building_id: Mapped[Optional[str]] = mapped_column(ForeignKey("buildings.id"), nullable=True)
    floor_id: Mapped[Optional[str]] = mapped_column(ForeignKey("floors.id"), nullable=True)
    room_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("building_rooms.id"), nullable=True
    )
    pou_point_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("pou_points.id"), nullable=True
    )
    part_id: Mapped[Optional[str]] = mapped_column(ForeignKey("parts_listing.id"), nullable=True)
    # assets -> work_orders -> filter_installations -> assets is a cycle; this link is nullified.
    installation_work_order_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("work_orders.id", use_alter=True, name="fk_assets_installation_work_order_id"),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class AssetSpecification(Base, TimestampMixin):
    __tablename__ = "asset_specifications"

    id: Mapped[str] = _id_column()
    asset_id: Mapped[str] = mapped_column(ForeignKey("assets.id"), nullable=False)
    spec_id: Mapped[str] = mapped_column(ForeignKey("equipment_specifications.id"), nullable=False)
    value: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)


class AssetMaintenanceProfile(Base, TimestampMixin):
    __tablename__ = "asset_maintenance_profiles"

    id: Mapped[str] = _id_column()
    asset_id: Mapped[str] = mapped_column(ForeignKey("assets.id"), nullable=False)
    profile_id: Mapped[str] = mapped_column(ForeignKey("maintenance_profiles.id"), nullable=False)


class ConnectedEquipment(Base, TimestampMixin):
    __tablename__ = "connected_equipment"

    id: Mapped[str] = _id_column()
    filter_asset_id: Mapped[str] = mapped_column(ForeignKey("assets.id"), nullable=False)
    connected_asset_id: Mapped[str] = mapped_column(ForeignKey("assets.id"), nullable=False)


class TelemetryReading(Base):
    __tablename__ = "telemetry_readings"

    id: Mapped[str] = _id_column()
    asset_id: Mapped[str] = mapped_column(ForeignKey("assets.id"), nullable=False)
    metric: Mapped[str] = mapped_column(String(80), nullable=False)
    value: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 4), nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )


class PublicAccessPoint(Base, TimestampMixin):
    __tablename__ = "public_access_points"

    id: Mapped[str] = _id_column()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    asset_id: Mapped[Optional[str]] = mapped_column(ForeignKey("assets.id"), nullable=True)
    room_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("building_rooms.id"), nullable=True
    )


# --- Filter installations and monitoring -----------------------------------


class FilterInstallation(Base, TimestampMixin):
    __tablename__ = "filter_installations"

    id: Mapped[str] = _id_column()
    account_id: Mapped[Optional[str]] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    location_id: Mapped[Optional[str]] = mapped_column(ForeignKey("locations.id"), nullable=True)
    building_id: Mapped[Optional[str]] = mapped_column(ForeignKey("buildings.id"), nullable=True)
    floor_id: Mapped[Optional[str]] = mapped_column(ForeignKey("floors.id"), nullable=True)
    room_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("building_rooms.id"), nullable=True
    )
    asset_id: Mapped[Optional[str]] = mapped_column(ForeignKey("assets.id"), nullable=True)
    project_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("water_filter_projects.id"), nullable=True
    )
    filter_model_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("parts_listing.id"), nullable=True
    )
    installed_by: Mapped[Optional[str]] = mapped_column(ForeignKey("vendors.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")


class InstalledCartridge(Base, TimestampMixin):
    __tablename__ = "installed_cartridges"

    id: Mapped[str] = _id_column()
    filter_installation_id: Mapped[str] = mapped_column(
        ForeignKey("filter_installations.id"), nullable=False
    )
    asset_id: Mapped[Optional[str]] = mapped_column(ForeignKey("assets.id"), nullable=True)
    installed_on: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class FilterLifespanTracking(Base, TimestampMixin):
    __tablename__ = "filter_lifespan_tracking"

    id: Mapped[str] = _id_column()
    filter_installation_id: Mapped[str] = mapped_column(
        ForeignKey("filter_installations.id"), nullable=False
    )
    gallons_processed: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)


class WaterQualityMetric(Base, TimestampMixin):
    __tablename__ = "water_quality_metrics"

    id: Mapped[str] = _id_column()
    filter_installation_id: Mapped[str] = mapped_column(
        ForeignKey("filter_installations.id"), nullable=False
    )
    metric: Mapped[str] = mapped_column(String(80), nullable=False)
    value: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 4), nullable=True)


class LeakMonitoring(Base, TimestampMixin):
    __tablename__ = "leak_monitoring"

    id: Mapped[str] = _id_column()
    filter_installation_id: Mapped[str] = mapped_column(
        ForeignKey("filter_installations.id"), nullable=False
    )
    sensor_state: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)


class ServiceAlert(Base, TimestampMixin):
    __tablename__ = "service_alerts"

    id: Mapped[str] = _id_column()
    message: Mapped[str] = mapped_column(Text, nullable=False)
    asset_id: Mapped[Optional[str]] = mapped_column(ForeignKey("assets.id"), nullable=True)
    location_id: Mapped[Optional[str]] = mapped_column(ForeignKey("locations.id"), nullable=True)
    acknowledged_by: Mapped[Optional[str]] = mapped_column(
        ForeignKey("contacts_enhanced.id"), nullable=True
    )
    work_order_created: Mapped[Optional[str]] = mapped_column(
        ForeignKey("work_orders.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="open")


# --- Work order line tables -------------------------------------------------


class WorkOrderTask(Base, TimestampMixin):
    __tablename__ = "work_order_tasks"

    id: Mapped[str] = _id_column()
    work_order_id: Mapped[str] = mapped_column(ForeignKey("work_orders.id"), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)


class WorkOrderPart(Base, TimestampMixin):
    __tablename__ = "work_order_parts"

    id: Mapped[str] = _id_column()
    work_order_id: Mapped[str] = mapped_column(ForeignKey("work_orders.id"), nullable=False)
    part_id: Mapped[Optional[str]] = mapped_column(ForeignKey("parts_listing.id"), nullable=True)
    pou_point_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("pou_points.id"), nullable=True
    )
    installed_as_asset_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("assets.id"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class WorkOrderAsset(Base, TimestampMixin):
    __tablename__ = "work_order_assets"

    id: Mapped[str] = _id_column()
    work_order_id: Mapped[str] = mapped_column(ForeignKey("work_orders.id"), nullable=False)
    asset_id: Mapped[str] = mapped_column(ForeignKey("assets.id"), nullable=False)


class WorkOrderScope(Base, TimestampMixin):
    __tablename__ = "work_order_scopes"

    id: Mapped[str] = _id_column()
    work_order_id: Mapped[str] = mapped_column(ForeignKey("work_orders.id"), nullable=False)
    building_id: Mapped[Optional[str]] = mapped_column(ForeignKey("buildings.id"), nullable=True)
    floor_id: Mapped[Optional[str]] = mapped_column(ForeignKey("floors.id"), nullable=True)
    room_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("building_rooms.id"), nullable=True
    )

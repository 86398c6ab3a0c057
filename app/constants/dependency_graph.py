"""Authored relationship catalogue for the facilities schema.

``TABLE_REFERENCES`` lists, for every table, the columns elsewhere in the schema that hold a
reference to it and how a deletion resolves them. ``delete`` removes the referencing rows (and,
recursively, whatever references those rows); ``nullify`` keeps the row and clears the column.
The per-entity cascade graph is expanded from this catalogue at startup.
"""

GRAPH_VERSION = 3

DELETE = "delete"
NULLIFY = "nullify"

DEFAULT_SOFT_STATUS_COLUMNS = ("status", "is_active")

# Add-on modules that are not deployed everywhere; edges into them are existence-checked.
OPTIONAL_TABLES = frozenset(
    {
        "telemetry_readings",
        "water_quality_metrics",
        "leak_monitoring",
        "filter_lifespan_tracking",
        "public_access_points",
        "connected_equipment",
        "part_compatibility",
        "filter_maintenance_profiles",
    }
)

ENTITY_LABELS = {
    "accounts": "Accounts",
    "addresses": "Addresses",
    "locations": "Locations",
    "manufacturers": "Manufacturers",
    "contacts": "Contacts",
    "contacts_enhanced": "Enhanced Contacts",
    "customer_tier1": "Customer Tier 1",
    "customer_tier2": "Customer Tier 2",
    "customer_tier3": "Customer Tier 3",
    "asset_categories": "Asset Categories",
    "equipment_specifications": "Equipment Specs",
    "parts_listing": "Parts Listing",
    "cartridge_components": "Cartridge Components",
    "buildings": "Buildings",
    "floors": "Floors",
    "water_filter_projects": "Water Filter Projects",
    "filter_installations": "Filter Installations",
    "installed_cartridges": "Installed Cartridges",
    "water_quality_metrics": "Water Quality Metrics",
    "filter_lifespan_tracking": "Filter Lifespan Tracking",
    "leak_monitoring": "Leak Monitoring",
    "work_orders": "Work Orders",
    "work_order_tasks": "Work Order Tasks",
    "nsf_certifications": "NSF Certifications",
    "vendors": "Vendors",
    "vendor_types": "Vendor Types",
    "customer_campuses": "Customer Campuses",
    "building_rooms": "Building Rooms",
    "assets": "Assets",
    "asset_specifications": "Asset Specifications",
    "connected_equipment": "Connected Equipment",
    "work_order_types": "Work Order Types",
    "work_order_assets": "Work Order Assets",
    "work_order_parts": "Work Order Parts",
    "work_order_scopes": "Work Order Scopes",
    "maintenance_profiles": "Maintenance Profiles",
    "asset_maintenance_profiles": "Asset Maintenance Profiles",
    "service_alerts": "Service Alerts",
    "pou_points": "POU Points",
    "public_access_points": "Public Access Points",
    "telemetry_readings": "Telemetry Readings",
    "part_compatibility": "Part Compatibility",
    "users": "Users",
}

TABLE_REFERENCES = {
    # Customer hierarchy
    "accounts": (
        ("work_orders", "account_id", DELETE),
        ("assets", "account_id", DELETE),
        ("filter_installations", "account_id", DELETE),
        ("water_filter_projects", "account_id", DELETE),
        ("customer_campuses", "account_id", DELETE),
        ("account_vendor_links", "account_id", DELETE),
        ("user_links", "account_id", DELETE),
        ("contact_memberships", "account_id", DELETE),
        ("locations", "account_id", DELETE),
    ),
    "addresses": (
        ("locations", "address_id", DELETE),
    ),
    "locations": (
        ("service_alerts", "location_id", DELETE),
        ("assets", "location_id", DELETE),
        ("filter_installations", "location_id", DELETE),
        ("buildings", "location_id", DELETE),
    ),
    "buildings": (
        ("assets", "building_id", DELETE),
        ("filter_installations", "building_id", DELETE),
        ("work_order_scopes", "building_id", DELETE),
        ("building_rooms", "building_id", DELETE),
        ("floors", "building_id", DELETE),
    ),
    "floors": (
        ("assets", "floor_id", DELETE),
        ("filter_installations", "floor_id", DELETE),
        ("work_order_scopes", "floor_id", DELETE),
        ("building_rooms", "floor_id", DELETE),
    ),
    "building_rooms": (
        ("assets", "room_id", DELETE),
        ("filter_installations", "room_id", DELETE),
        ("public_access_points", "room_id", DELETE),
        ("work_order_scopes", "room_id", DELETE),
        ("pou_points", "room_id", DELETE),
    ),
    "pou_points": (
        ("assets", "pou_point_id", DELETE),
        ("work_order_parts", "pou_point_id", DELETE),
    ),
    # Assets and their satellites
    "assets": (
        ("telemetry_readings", "asset_id", DELETE),
        ("asset_specifications", "asset_id", DELETE),
        ("asset_maintenance_profiles", "asset_id", DELETE),
        ("connected_equipment", "filter_asset_id", DELETE),
        ("connected_equipment", "connected_asset_id", DELETE),
        ("service_alerts", "asset_id", DELETE),
        ("public_access_points", "asset_id", DELETE),
        ("work_order_assets", "asset_id", DELETE),
        ("installed_cartridges", "asset_id", DELETE),
        ("work_order_parts", "installed_as_asset_id", NULLIFY),
        ("filter_installations", "asset_id", DELETE),
    ),
    "filter_installations": (
        ("filter_lifespan_tracking", "filter_installation_id", DELETE),
        ("water_quality_metrics", "filter_installation_id", DELETE),
        ("leak_monitoring", "filter_installation_id", DELETE),
        ("installed_cartridges", "filter_installation_id", DELETE),
        ("work_orders", "filter_installation_id", NULLIFY),
    ),
    "water_filter_projects": (
        ("filter_installations", "project_id", DELETE),
    ),
    "work_orders": (
        ("work_order_tasks", "work_order_id", DELETE),
        ("work_order_parts", "work_order_id", DELETE),
        ("work_order_assets", "work_order_id", DELETE),
        ("work_order_scopes", "work_order_id", DELETE),
        ("service_alerts", "work_order_created", NULLIFY),
        ("assets", "installation_work_order_id", NULLIFY),
    ),
    # Parts catalogue
    "manufacturers": (
        ("parts_listing", "manufacturer_id", NULLIFY),
    ),
    "parts_listing": (
        ("part_compatibility", "part_id", DELETE),
        ("part_compatibility", "compatible_with_part_id", DELETE),
        ("filter_maintenance_profiles", "part_id", DELETE),
        ("cartridge_components", "parent_part_id", DELETE),
        ("work_order_parts", "part_id", DELETE),
        ("filter_installations", "filter_model_id", DELETE),
        ("assets", "part_id", DELETE),
    ),
    "equipment_specifications": (
        ("asset_specifications", "spec_id", DELETE),
    ),
    "maintenance_profiles": (
        ("asset_maintenance_profiles", "profile_id", DELETE),
    ),
    # People and vendors
    "contacts_enhanced": (
        ("contact_memberships", "contact_id", DELETE),
        ("customer_campuses", "campus_manager_id", DELETE),
        ("service_alerts", "acknowledged_by", NULLIFY),
    ),
    "vendors": (
        ("user_links", "vendor_id", DELETE),
        ("contact_memberships", "vendor_id", DELETE),
        ("account_vendor_links", "vendor_id", DELETE),
        ("filter_installations", "installed_by", DELETE),
        ("work_orders", "vendor_id", NULLIFY),
    ),
    "users": (
        ("user_links", "user_id", DELETE),
    ),
    # Master data: unlink rather than remove business records
    "customer_tier1": (
        ("accounts", "tier1_id", NULLIFY),
    ),
    "customer_tier2": (
        ("accounts", "tier2_id", NULLIFY),
    ),
    "customer_tier3": (
        ("accounts", "tier3_id", NULLIFY),
    ),
    "vendor_types": (
        ("vendors", "vendor_type_id", NULLIFY),
    ),
    "asset_categories": (
        ("parts_listing", "category_id", NULLIFY),
        ("maintenance_profiles", "asset_category_id", NULLIFY),
    ),
    "work_order_types": (
        ("work_orders", "work_order_type_id", NULLIFY),
    ),
}

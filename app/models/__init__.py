from app.models.entities import (
    CustomerTier1,
    CustomerTier2,
    CustomerTier3,
    VendorType,
    AssetCategory,
    WorkOrderType,
    Manufacturer,
    Address,
    User,
    Contact,
    ContactEnhanced,
    Vendor,
    NsfCertification,
    EquipmentSpecification,
    MaintenanceProfile,
    Account,
    Location,
    Building,
    Floor,
    BuildingRoom,
    PouPoint,
    CustomerCampus,
    AccountVendorLink,
    UserLink,
    ContactMembership,
    PartListing,
    PartCompatibility,
    FilterMaintenanceProfile,
    CartridgeComponent,
    WaterFilterProject,
    WorkOrder,
    Asset,
    AssetSpecification,
    AssetMaintenanceProfile,
    ConnectedEquipment,
    TelemetryReading,
    PublicAccessPoint,
    FilterInstallation,
    InstalledCartridge,
    FilterLifespanTracking,
    WaterQualityMetric,
    LeakMonitoring,
    ServiceAlert,
    WorkOrderTask,
    WorkOrderPart,
    WorkOrderAsset,
    WorkOrderScope,
)

__all__ = [
    "CustomerTier1",
    "CustomerTier2",
    "CustomerTier3",
    "VendorType",
    "AssetCategory",
    "WorkOrderType",
    "Manufacturer",
    "Address",
    "User",
    "Contact",
    "ContactEnhanced",
    "Vendor",
    "NsfCertification",
    "EquipmentSpecification",
    "MaintenanceProfile",
    "Account",
    "Location",
    "Building",
    "Floor",
    "BuildingRoom",
    "PouPoint",
    "CustomerCampus",
    "AccountVendorLink",
    "UserLink",
    "ContactMembership",
    "PartListing",
    "PartCompatibility",
    "FilterMaintenanceProfile",
    "CartridgeComponent",
    "WaterFilterProject",
    "WorkOrder",
    "Asset",
    "AssetSpecification",
    "AssetMaintenanceProfile",
    "ConnectedEquipment",
    "TelemetryReading",
    "PublicAccessPoint",
    "FilterInstallation",
    "InstalledCartridge",
    "FilterLifespanTracking",
    "WaterQualityMetric",
    "LeakMonitoring",
    "ServiceAlert",
    "WorkOrderTask",
    "WorkOrderPart",
    "WorkOrderAsset",
    "WorkOrderScope",
]

"""
Database Models

Every fleet table carries tenant_id for multi-tenant isolation, except the
global vehicle_types reference table and the depot join tables (scoped
through their depot).
"""
from fleetpro.models.tenant import Tenant
from fleetpro.models.user import User, UserRole
from fleetpro.models.invitation import UserInvitation
from fleetpro.models.depot import Depot, DepotVehicle, DepotDriver
from fleetpro.models.vehicle import Vehicle, VehicleType, VehicleStatus
from fleetpro.models.driver import Driver, DriverStatus
from fleetpro.models.maintenance_provider import MaintenanceProvider
from fleetpro.models.inspection import (
    InspectionSchedule,
    InspectionCompletion,
    InspectionType,
    SafetyInspection,
    SafetyInspectionType,
)
from fleetpro.models.defect import VehicleDefect, DefectType, DefectStatus
from fleetpro.models.work_order import WorkOrder, WorkOrderPriority, WorkOrderStatus
from fleetpro.models.vehicle_status_check import VehicleStatusCheck

__all__ = [
    "Tenant",
    "User",
    "UserRole",
    "UserInvitation",
    "Depot",
    "DepotVehicle",
    "DepotDriver",
    "Vehicle",
    "VehicleType",
    "VehicleStatus",
    "Driver",
    "DriverStatus",
    "MaintenanceProvider",
    "InspectionSchedule",
    "InspectionCompletion",
    "InspectionType",
    "SafetyInspection",
    "SafetyInspectionType",
    "VehicleDefect",
    "DefectType",
    "DefectStatus",
    "WorkOrder",
    "WorkOrderPriority",
    "WorkOrderStatus",
    "VehicleStatusCheck",
]

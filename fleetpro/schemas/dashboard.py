"""
Dashboard Schemas
"""
from pydantic import BaseModel


class DashboardStats(BaseModel):
    vehicle_count: int
    driver_count: int
    maintenance_provider_count: int
    open_work_orders: int
    overdue_inspections: int
    open_defects: int

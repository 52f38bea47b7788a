"""
FleetPro

Multi-tenant fleet management API: organisations, users and invitations,
depots, drivers, vehicles, maintenance providers, inspections, defects
and work orders.
"""

__version__ = "1.0.0"

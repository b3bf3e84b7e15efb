"""Business logic services."""

from cash_drawer.services.movement_service import MovementService
from cash_drawer.services.drawer_service import DrawerService

__all__ = ["MovementService", "DrawerService"]

"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from cash_drawer.models.base import Base
from cash_drawer.models.enums import (
    DrawerStatus,
    MovementType,
    MovementDirection,
)
from cash_drawer.models.drawer_session import DrawerSession
from cash_drawer.models.movement import Movement

__all__ = [
    "Base",
    "DrawerStatus",
    "MovementType",
    "MovementDirection",
    "DrawerSession",
    "Movement",
]

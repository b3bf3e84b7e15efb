"""
Shared enumerations for database models.

Python enums mapped to database enums, so an invalid status
or movement type is rejected by the database as well as by
request validation.
"""

import enum


class DrawerStatus(str, enum.Enum):
    """Lifecycle of a drawer session. CLOSED is terminal."""
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class MovementType(str, enum.Enum):
    """What a movement records."""
    INFLOW = "INFLOW"
    OUTFLOW = "OUTFLOW"
    ADJUSTMENT = "ADJUSTMENT"


class MovementDirection(str, enum.Enum):
    """Effect of a movement on the drawer balance."""
    IN = "IN"
    OUT = "OUT"


# Direction implied by a movement type. ADJUSTMENT has none;
# the caller must state it.
IMPLIED_DIRECTION: dict[MovementType, MovementDirection] = {
    MovementType.INFLOW: MovementDirection.IN,
    MovementType.OUTFLOW: MovementDirection.OUT,
}

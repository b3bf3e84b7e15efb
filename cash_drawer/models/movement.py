"""
Drawer movement model.

Each movement is one ledger entry against a drawer session.
Movements are immutable: once written they are never updated
or deleted. A mistake is corrected with a compensating
ADJUSTMENT movement.

The amount is always a positive magnitude. The direction
column says whether it adds to or subtracts from the drawer.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, Text, ForeignKey,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cash_drawer.models.base import Base
from cash_drawer.models.enums import MovementType, MovementDirection


class Movement(Base):
    __tablename__ = "drawer_movements"

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    session_id: Mapped[int] = mapped_column(
        ForeignKey("drawer_sessions.id"), nullable=False, index=True
    )
    company_id: Mapped[int] = mapped_column(nullable=False, index=True)
    branch_id: Mapped[int] = mapped_column(nullable=False, index=True)
    movement_type: Mapped[MovementType] = mapped_column(
        SAEnum(
            MovementType,
            name="movement_type_enum",
            create_constraint=True,
        ),
        nullable=False,
        index=True,
    )
    direction: Mapped[MovementDirection] = mapped_column(
        SAEnum(
            MovementDirection,
            name="movement_direction_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    category: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Opaque reference into the payments subsystem
    payment_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
    effective_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    session: Mapped["DrawerSession"] = relationship(
        back_populates="movements"
    )

    def __repr__(self) -> str:
        return (
            f"<Movement {self.movement_type.value} "
            f"{self.direction.value} {self.amount}>"
        )

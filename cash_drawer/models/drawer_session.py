"""
Drawer session model.

One opening-to-closing period of a physical cash register
at a branch. Sessions are never deleted, only closed.

At most one session per (company, branch) may be OPEN. The
DrawerService checks this before inserting, and the partial
unique index below rejects the second insert if two requests
race past the check.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime, Numeric, Text, Index,
    Enum as SAEnum, Uuid, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cash_drawer.models.base import Base
from cash_drawer.models.enums import DrawerStatus


VALID_TRANSITIONS: dict[DrawerStatus, set[DrawerStatus]] = {
    DrawerStatus.OPEN: {DrawerStatus.CLOSED},
    DrawerStatus.CLOSED: set(),  # Terminal state, no reopen
}


class DrawerSession(Base):
    __tablename__ = "drawer_sessions"
    __table_args__ = (
        Index(
            "uq_drawer_sessions_one_open_per_branch",
            "company_id",
            "branch_id",
            unique=True,
            postgresql_where=text("status = 'OPEN'"),
            sqlite_where=text("status = 'OPEN'"),
        ),
        Index("ix_drawer_sessions_status", "company_id", "branch_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    company_id: Mapped[int] = mapped_column(nullable=False, index=True)
    branch_id: Mapped[int] = mapped_column(nullable=False, index=True)
    opened_by_id: Mapped[int] = mapped_column(nullable=False)
    closed_by_id: Mapped[int | None] = mapped_column(nullable=True)
    status: Mapped[DrawerStatus] = mapped_column(
        SAEnum(
            DrawerStatus,
            name="drawer_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=DrawerStatus.OPEN,
    )
    opening_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    closing_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    # Computed balance frozen at close
    expected_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True, default=None
    )
    variance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    opening_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    closing_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    opened_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    movements: Mapped[list["Movement"]] = relationship(
        back_populates="session",
        order_by="[Movement.effective_at, Movement.id]",
    )

    @property
    def is_open(self) -> bool:
        return self.status == DrawerStatus.OPEN

    def can_transition_to(self, new_status: DrawerStatus) -> bool:
        """Check if a state transition is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __repr__(self) -> str:
        return (
            f"<DrawerSession {self.id} branch={self.branch_id} "
            f"({self.status.value})>"
        )

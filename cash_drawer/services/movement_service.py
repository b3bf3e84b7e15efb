"""
Movement service: appends entries to a drawer's ledger.

Rules enforced here:
1. Amounts are positive
2. The direction of every movement is unambiguous
3. Movements are only written against an OPEN drawer
4. Movements are append-only; there is no update or delete

The drawer row is locked before its status is checked, so a
movement cannot slip in behind a concurrent close.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from cash_drawer.exceptions import (
    DrawerNotFoundError,
    DrawerNotOpenError,
    ValidationError,
)
from cash_drawer.logging_config import get_logger
from cash_drawer.models.drawer_session import DrawerSession
from cash_drawer.models.enums import MovementDirection, MovementType
from cash_drawer.models.movement import Movement
from cash_drawer.schemas.drawer import MovementCreate
from cash_drawer.services.reconciliation import resolve_direction

logger = get_logger("services.movement")


class MovementService:
    """
    The only writer of drawer movements.

    Like every service here it takes the request's database
    session and only flushes; the caller commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(self, request: MovementCreate) -> Movement:
        """
        Record a movement against an open drawer.

        Raises ValidationError for a non-positive amount or an
        ambiguous direction, DrawerNotFoundError if the drawer
        does not exist and DrawerNotOpenError if it is closed.
        """
        if request.amount is None or Decimal(request.amount) <= 0:
            raise ValidationError("amount must be positive", field="amount")
        direction = resolve_direction(request.movement_type, request.direction)

        session = self.db.execute(
            select(DrawerSession)
            .where(DrawerSession.id == request.session_id)
            .with_for_update()
        ).scalar_one_or_none()

        if session is None:
            logger.warning(
                "movement_rejected",
                extra={"session_id": request.session_id, "reason": "not_found"},
            )
            raise DrawerNotFoundError(request.session_id)
        if not session.is_open:
            logger.warning(
                "movement_rejected",
                extra={"session_id": session.id, "reason": "not_open"},
            )
            raise DrawerNotOpenError(session.id)

        movement = self.append(
            session,
            movement_type=request.movement_type,
            direction=direction,
            amount=request.amount,
            category=request.category,
            description=request.description,
            payment_id=request.payment_id,
            effective_at=request.effective_at,
        )
        self.db.flush()

        logger.info(
            "movement_recorded",
            extra={
                "session_id": session.id,
                "movement_id": movement.id,
                "movement_type": movement.movement_type.value,
                "direction": movement.direction.value,
                "amount": movement.amount,
            },
        )
        return movement

    def append(
        self,
        session: DrawerSession,
        *,
        movement_type: MovementType,
        direction: MovementDirection,
        amount: Decimal,
        category: str | None = None,
        description: str | None = None,
        payment_id: int | None = None,
        effective_at: datetime | None = None,
    ) -> Movement:
        """
        Add a movement to a drawer the caller has already locked
        and checked to be open. Does not flush.
        """
        movement = Movement(
            session=session,
            company_id=session.company_id,
            branch_id=session.branch_id,
            movement_type=movement_type,
            direction=direction,
            amount=amount,
            category=category,
            description=description,
            payment_id=payment_id,
            effective_at=effective_at or datetime.utcnow(),
        )
        self.db.add(movement)
        return movement

    def list_by_session(self, session_id: int) -> list[Movement]:
        """Return a drawer's movements, oldest first."""
        if self.db.get(DrawerSession, session_id) is None:
            raise DrawerNotFoundError(session_id)

        movements = self.db.execute(
            select(Movement)
            .where(Movement.session_id == session_id)
            .order_by(Movement.effective_at.asc(), Movement.id.asc())
        ).scalars().all()
        return list(movements)

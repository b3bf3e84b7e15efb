"""
Drawer service: the open/close state machine for cash drawers.

This service enforces:
1. At most one OPEN drawer per (company, branch)
2. Opening a drawer always records its opening amount as the
   first movement, in the same unit of work
3. Closing freezes the expected balance and the variance
4. CLOSED is terminal; there is no reopen

The caller owns the transaction. Open and Close only flush,
so the API layer commits the drawer and its seed movement
together or rolls both back.
"""

from datetime import datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cash_drawer.exceptions import (
    ConflictError,
    DrawerNotFoundError,
    DrawerNotOpenError,
    ValidationError,
)
from cash_drawer.logging_config import get_logger
from cash_drawer.models.drawer_session import DrawerSession
from cash_drawer.models.enums import (
    DrawerStatus,
    MovementDirection,
    MovementType,
)
from cash_drawer.schemas.drawer import (
    DrawerOpen,
    DrawerClose,
    DrawerListFilters,
    DrawerSummary,
)
from cash_drawer.services.movement_service import MovementService
from cash_drawer.services.reconciliation import (
    compute_balance,
    compute_variance,
    summarize,
)

logger = get_logger("services.drawer")

OPENING_BALANCE_LABEL = "opening balance"


class DrawerService:

    def __init__(self, db: Session):
        self.db = db
        self.movement_service = MovementService(db)

    def _find_open_session(
        self, company_id: int, branch_id: int
    ) -> DrawerSession | None:
        """Return the branch's open drawer, locking it if present."""
        return self.db.execute(
            select(DrawerSession)
            .where(
                DrawerSession.company_id == company_id,
                DrawerSession.branch_id == branch_id,
                DrawerSession.status == DrawerStatus.OPEN,
            )
            .with_for_update()
        ).scalar_one_or_none()

    def _get_for_update(self, session_id: int) -> DrawerSession | None:
        return self.db.execute(
            select(DrawerSession)
            .where(DrawerSession.id == session_id)
            .with_for_update()
        ).scalar_one_or_none()

    def open(self, request: DrawerOpen) -> DrawerSession:
        """
        Open a drawer at a branch.

        Raises ConflictError if the branch already has an open
        drawer. If two opens race past the check, the partial
        unique index on open drawers rejects the second insert
        and it is reported the same way.
        """
        if request.opening_amount is None or request.opening_amount < 0:
            raise ValidationError(
                "opening amount must be zero or positive",
                field="opening_amount",
            )

        existing = self._find_open_session(
            request.company_id, request.branch_id
        )
        if existing:
            logger.warning(
                "drawer_open_conflict",
                extra={
                    "company_id": request.company_id,
                    "branch_id": request.branch_id,
                    "open_session_id": existing.id,
                },
            )
            raise ConflictError(request.company_id, request.branch_id)

        now = datetime.utcnow()
        session = DrawerSession(
            company_id=request.company_id,
            branch_id=request.branch_id,
            opened_by_id=request.opened_by_id,
            opening_amount=request.opening_amount,
            opening_notes=request.notes,
            status=DrawerStatus.OPEN,
            opened_at=now,
        )
        self.db.add(session)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                "drawer_open_conflict",
                extra={
                    "company_id": request.company_id,
                    "branch_id": request.branch_id,
                    "reason": "unique_index",
                },
            )
            raise ConflictError(request.company_id, request.branch_id)

        # Seed the ledger with the opening balance
        self.movement_service.append(
            session,
            movement_type=MovementType.INFLOW,
            direction=MovementDirection.IN,
            amount=request.opening_amount,
            category=OPENING_BALANCE_LABEL,
            description=request.notes or OPENING_BALANCE_LABEL,
            effective_at=now,
        )
        self.db.flush()

        logger.info(
            "drawer_opened",
            extra={
                "session_id": session.id,
                "company_id": session.company_id,
                "branch_id": session.branch_id,
                "opened_by_id": session.opened_by_id,
                "opening_amount": session.opening_amount,
            },
        )
        return session

    def close(self, session_id: int, request: DrawerClose) -> DrawerSession:
        """
        Close an open drawer against the counted cash.

        Expected balance comes from the movement ledger; the
        variance is counted minus expected. Raises
        DrawerNotFoundError or DrawerNotOpenError.
        """
        if request.closing_amount is None or request.closing_amount < 0:
            raise ValidationError(
                "closing amount must be zero or positive",
                field="closing_amount",
            )

        session = self._get_for_update(session_id)
        if session is None:
            raise DrawerNotFoundError(session_id)
        if not session.can_transition_to(DrawerStatus.CLOSED):
            raise DrawerNotOpenError(session_id)

        movements = self.movement_service.list_by_session(session.id)
        expected = compute_balance(movements)

        session.status = DrawerStatus.CLOSED
        session.closed_at = datetime.utcnow()
        session.closed_by_id = request.closed_by_id
        session.closing_amount = request.closing_amount
        session.closing_notes = request.notes
        session.expected_amount = expected
        session.variance = compute_variance(request.closing_amount, expected)
        self.db.flush()

        logger.info(
            "drawer_closed",
            extra={
                "session_id": session.id,
                "branch_id": session.branch_id,
                "closed_by_id": session.closed_by_id,
                "expected_amount": expected,
                "closing_amount": session.closing_amount,
                "variance": session.variance,
            },
        )
        return session

    def get_open_session(
        self, branch_id: int, company_id: int | None = None
    ) -> DrawerSession | None:
        """
        The branch's open drawer, or None if there is none.

        Branch ids are only unique within a company. Without a
        company_id, open drawers in more than one company are
        ambiguous and raise ValidationError.
        """
        query = select(DrawerSession).where(
            DrawerSession.branch_id == branch_id,
            DrawerSession.status == DrawerStatus.OPEN,
        )
        if company_id is not None:
            query = query.where(DrawerSession.company_id == company_id)

        sessions = self.db.execute(query).scalars().all()
        if len(sessions) > 1:
            raise ValidationError(
                f"Branch {branch_id} has open drawers in several companies; "
                "company_id is required",
                field="company_id",
            )
        return sessions[0] if sessions else None

    def get_session(self, session_id: int) -> DrawerSession:
        """Get a drawer by ID."""
        session = self.db.get(DrawerSession, session_id)
        if not session:
            raise DrawerNotFoundError(session_id)
        return session

    def list_sessions(self, filters: DrawerListFilters) -> list[DrawerSession]:
        """
        Drawers matching all given filters, most recently opened first.

        date_to is inclusive of the whole day.
        """
        if (
            filters.date_from is not None
            and filters.date_to is not None
            and filters.date_from > filters.date_to
        ):
            raise ValidationError(
                "date_from must not be after date_to", field="date_from"
            )

        query = select(DrawerSession)
        if filters.company_id is not None:
            query = query.where(DrawerSession.company_id == filters.company_id)
        if filters.branch_id is not None:
            query = query.where(DrawerSession.branch_id == filters.branch_id)
        if filters.date_from is not None:
            query = query.where(
                DrawerSession.opened_at
                >= datetime.combine(filters.date_from, time.min)
            )
        if filters.date_to is not None:
            query = query.where(
                DrawerSession.opened_at
                < datetime.combine(filters.date_to + timedelta(days=1), time.min)
            )

        sessions = self.db.execute(
            query.order_by(
                DrawerSession.opened_at.desc(), DrawerSession.id.desc()
            )
        ).scalars().all()
        return list(sessions)

    def summarize(self, session_id: int) -> DrawerSummary:
        """Reconciliation totals for a drawer."""
        session = self.get_session(session_id)
        movements = self.movement_service.list_by_session(session.id)
        return summarize(session, movements)

"""
Reconciliation engine: balance and variance arithmetic.

Everything here is a pure function over movements that are
already loaded. Nothing touches the database, so the rules
can be tested against a literal list of movements.

The opening balance is not added separately. Opening a drawer
records it as the first INFLOW movement, so it is already
part of every movement list.
"""

from decimal import Decimal
from typing import Iterable, Protocol

from cash_drawer.exceptions import ValidationError
from cash_drawer.models.enums import (
    DrawerStatus,
    MovementDirection,
    MovementType,
    IMPLIED_DIRECTION,
)
from cash_drawer.schemas.drawer import DrawerSummary

ZERO = Decimal("0")


class MovementLike(Protocol):
    movement_type: MovementType
    direction: MovementDirection | None
    amount: Decimal


def resolve_direction(
    movement_type: MovementType,
    direction: MovementDirection | None,
) -> MovementDirection:
    """
    Decide which way a movement moves the balance.

    INFLOW and OUTFLOW have a fixed direction; a conflicting
    explicit direction is rejected. ADJUSTMENT has no default
    and must be given one.
    """
    implied = IMPLIED_DIRECTION.get(movement_type)
    if implied is None:
        if direction is None:
            raise ValidationError(
                "direction is required for ADJUSTMENT movements",
                field="direction",
            )
        return direction
    if direction is not None and direction != implied:
        raise ValidationError(
            f"{movement_type.value} movements always have "
            f"direction {implied.value}",
            field="direction",
        )
    return implied


def signed_amount(movement: MovementLike) -> Decimal:
    """Amount with the sign of its effect on the drawer."""
    direction = resolve_direction(movement.movement_type, movement.direction)
    amount = Decimal(movement.amount)
    return amount if direction == MovementDirection.IN else -amount


def compute_balance(movements: Iterable[MovementLike]) -> Decimal:
    """Fold the movement ledger into a balance, starting at zero."""
    return sum((signed_amount(m) for m in movements), ZERO)


def compute_variance(closing_amount: Decimal, expected: Decimal) -> Decimal:
    """Counted minus computed: positive is surplus, negative is shortage."""
    return Decimal(closing_amount) - Decimal(expected)


def summarize(session, movements: list[MovementLike]) -> DrawerSummary:
    """
    Totals for one drawer session, bucketed by direction.

    Variance is only meaningful once the drawer is closed; an
    open drawer reports zero.
    """
    total_inflow = ZERO
    total_outflow = ZERO
    for movement in movements:
        amount = signed_amount(movement)
        if amount >= 0:
            total_inflow += amount
        else:
            total_outflow -= amount

    closed = session.status == DrawerStatus.CLOSED
    return DrawerSummary(
        session_id=session.id,
        status=session.status,
        opening_amount=session.opening_amount,
        total_inflow=total_inflow,
        total_outflow=total_outflow,
        computed_balance=total_inflow - total_outflow,
        closing_amount=session.closing_amount if closed else ZERO,
        variance=session.variance if closed else ZERO,
        movement_count=len(movements),
    )

"""
Pydantic schemas for drawer operations.

Request bodies accept the field names used by the admin front
end (montoInicial, sedeId, ...) as well as the Python names.
Responses are always returned with the Python names.
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from cash_drawer.models.enums import (
    DrawerStatus,
    MovementType,
    MovementDirection,
)


# --- Request Schemas ---

class DrawerOpen(BaseModel):
    """Request to open a drawer at a branch."""
    opening_amount: Decimal = Field(
        alias="montoInicial", ge=0, max_digits=12, decimal_places=2
    )
    company_id: int = Field(alias="empresaId", gt=0)
    branch_id: int = Field(alias="sedeId", gt=0)
    opened_by_id: int = Field(alias="usuarioId", gt=0)
    notes: str | None = Field(
        default=None, alias="observaciones", max_length=1000
    )

    model_config = {"populate_by_name": True}


class DrawerClose(BaseModel):
    """Request to close an open drawer with the counted cash."""
    closing_amount: Decimal = Field(
        alias="montoFinal", ge=0, max_digits=12, decimal_places=2
    )
    closed_by_id: int = Field(alias="usuarioId", gt=0)
    notes: str | None = Field(
        default=None, alias="observaciones", max_length=1000
    )

    model_config = {"populate_by_name": True}


class MovementCreate(BaseModel):
    """A single ledger entry against an open drawer."""
    session_id: int = Field(alias="cajaId", gt=0)
    movement_type: MovementType = Field(alias="tipo")
    amount: Decimal = Field(
        alias="monto", gt=0, max_digits=12, decimal_places=2
    )
    category: str | None = Field(
        default=None, alias="concepto", max_length=100
    )
    description: str | None = Field(
        default=None, alias="observaciones", max_length=1000
    )
    # Required for ADJUSTMENT, implied for INFLOW and OUTFLOW
    direction: MovementDirection | None = Field(
        default=None, alias="direccion"
    )
    payment_id: int | None = Field(default=None, alias="pagoId", gt=0)
    effective_at: datetime | None = Field(default=None, alias="fecha")

    model_config = {"populate_by_name": True}

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("concepto must not be blank")
        return v

    @field_validator("effective_at")
    @classmethod
    def effective_at_as_utc(cls, v: datetime | None) -> datetime | None:
        # Stored timestamps are naive UTC
        if v is not None and v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class DrawerListFilters(BaseModel):
    """Conjunctive filters for listing drawer sessions."""
    company_id: int | None = None
    branch_id: int | None = None
    date_from: date | None = None
    date_to: date | None = None


# --- Response Schemas ---

class MovementResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    session_id: int
    company_id: int
    branch_id: int
    movement_type: MovementType
    direction: MovementDirection
    amount: Decimal
    category: str | None
    description: str | None
    payment_id: int | None
    effective_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class DrawerSessionResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    company_id: int
    branch_id: int
    opened_by_id: int
    closed_by_id: int | None
    status: DrawerStatus
    opening_amount: Decimal
    closing_amount: Decimal
    expected_amount: Decimal | None
    variance: Decimal
    opening_notes: str | None
    closing_notes: str | None
    opened_at: datetime
    closed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DrawerSessionDetailResponse(DrawerSessionResponse):
    """A drawer session together with its movements."""
    movements: list[MovementResponse]


class DrawerSummary(BaseModel):
    """Reconciliation totals for one drawer session."""
    session_id: int
    status: DrawerStatus
    opening_amount: Decimal
    total_inflow: Decimal
    total_outflow: Decimal
    computed_balance: Decimal
    closing_amount: Decimal
    variance: Decimal
    movement_count: int

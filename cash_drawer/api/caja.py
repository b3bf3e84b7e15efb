"""
Cash drawer ("caja") API endpoints.

The API layer is thin: it turns requests into service calls,
commits or rolls back the unit of work, and maps typed errors
to HTTP status codes. All rules live in the services.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cash_drawer.exceptions import (
    ConflictError,
    DrawerError,
    NotFoundError,
    ValidationError,
)
from cash_drawer.models.base import get_db
from cash_drawer.services.drawer_service import DrawerService
from cash_drawer.services.movement_service import MovementService
from cash_drawer.schemas.drawer import (
    DrawerOpen,
    DrawerClose,
    DrawerListFilters,
    DrawerSessionResponse,
    DrawerSessionDetailResponse,
    DrawerSummary,
    MovementCreate,
    MovementResponse,
)

router = APIRouter(prefix="/caja", tags=["Caja"])

NOT_OPEN_MESSAGE = "Drawer not found or not open"


def _http_error(error: DrawerError, not_found_detail: str | None = None):
    """Translate a typed drawer error into an HTTPException."""
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=422,
            detail=[{
                "loc": ["body", error.field] if error.field else ["body"],
                "msg": str(error),
                "type": error.code,
            }],
        )
    if isinstance(error, ConflictError):
        return HTTPException(
            status_code=409,
            detail={"code": error.code, "message": str(error)},
        )
    if isinstance(error, NotFoundError):
        return HTTPException(
            status_code=404,
            detail={
                "code": error.code,
                "message": not_found_detail or str(error),
            },
        )
    return HTTPException(
        status_code=400, detail={"code": error.code, "message": str(error)}
    )


@router.post("/abrir", response_model=DrawerSessionDetailResponse, status_code=201)
def open_drawer(
    request: DrawerOpen,
    db: Session = Depends(get_db),
):
    """
    Open a drawer at a branch.

    The opening amount is recorded as the drawer's first
    movement in the same commit.
    """
    service = DrawerService(db)
    try:
        session = service.open(request)
        db.commit()
        return session
    except DrawerError as e:
        db.rollback()
        raise _http_error(e)


@router.patch("/{session_id}/cerrar", response_model=DrawerSessionResponse)
def close_drawer(
    session_id: int,
    request: DrawerClose,
    db: Session = Depends(get_db),
):
    """Close an open drawer and record the variance."""
    service = DrawerService(db)
    try:
        session = service.close(session_id, request)
        db.commit()
        return session
    except DrawerError as e:
        db.rollback()
        raise _http_error(e, not_found_detail=NOT_OPEN_MESSAGE)


@router.get("/activa/{branch_id}", response_model=DrawerSessionDetailResponse)
def get_open_drawer(
    branch_id: int,
    company_id: int | None = Query(default=None, alias="empresaId"),
    db: Session = Depends(get_db),
):
    """The branch's open drawer with its movements."""
    service = DrawerService(db)
    try:
        session = service.get_open_session(branch_id, company_id=company_id)
    except DrawerError as e:
        raise _http_error(e)
    if session is None:
        raise HTTPException(
            status_code=404,
            detail={
                "code": "NO_OPEN_DRAWER",
                "message": f"No open drawer for branch {branch_id}",
            },
        )
    return session


@router.get("", response_model=list[DrawerSessionResponse])
def list_drawers(
    company_id: int | None = Query(default=None, alias="empresaId"),
    branch_id: int | None = Query(default=None, alias="sedeId"),
    date_from: date | None = Query(default=None, alias="fechaInicio"),
    date_to: date | None = Query(default=None, alias="fechaFin"),
    db: Session = Depends(get_db),
):
    """List drawers, most recently opened first."""
    service = DrawerService(db)
    try:
        return service.list_sessions(DrawerListFilters(
            company_id=company_id,
            branch_id=branch_id,
            date_from=date_from,
            date_to=date_to,
        ))
    except DrawerError as e:
        raise _http_error(e)


@router.post("/movimiento", response_model=MovementResponse, status_code=201)
def record_movement(
    request: MovementCreate,
    db: Session = Depends(get_db),
):
    """Record a movement against an open drawer."""
    service = MovementService(db)
    try:
        movement = service.record(request)
        db.commit()
        return movement
    except DrawerError as e:
        db.rollback()
        raise _http_error(e, not_found_detail=NOT_OPEN_MESSAGE)


@router.get("/{session_id}", response_model=DrawerSessionDetailResponse)
def get_drawer(
    session_id: int,
    db: Session = Depends(get_db),
):
    """Get a drawer with its movements."""
    service = DrawerService(db)
    try:
        return service.get_session(session_id)
    except DrawerError as e:
        raise _http_error(e)


@router.get("/{session_id}/movimientos", response_model=list[MovementResponse])
def list_movements(
    session_id: int,
    db: Session = Depends(get_db),
):
    """A drawer's movements, oldest first."""
    service = MovementService(db)
    try:
        return service.list_by_session(session_id)
    except DrawerError as e:
        raise _http_error(e)


@router.get("/{session_id}/resumen", response_model=DrawerSummary)
def summarize_drawer(
    session_id: int,
    db: Session = Depends(get_db),
):
    """Reconciliation totals for a drawer."""
    service = DrawerService(db)
    try:
        return service.summarize(session_id)
    except DrawerError as e:
        raise _http_error(e)

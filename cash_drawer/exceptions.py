"""
Typed exceptions for the cash drawer ledger.

Every exception carries a machine-readable `code` so the API
layer and log records never have to parse message text.

    DrawerError
    +-- ValidationError
    +-- ConflictError
    +-- NotFoundError
        +-- DrawerNotFoundError
        +-- DrawerNotOpenError

Close and Record report a missing drawer and a closed drawer
through the NotFoundError family. Catch NotFoundError to treat
them alike, or the subclasses to tell them apart.
"""


class DrawerError(Exception):
    """Base exception for all cash drawer errors."""

    code: str = "DRAWER_ERROR"


class ValidationError(DrawerError):
    """Input is malformed or out of range."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class ConflictError(DrawerError):
    """A drawer is already open for the branch."""

    code: str = "DRAWER_ALREADY_OPEN"

    def __init__(self, company_id: int, branch_id: int):
        self.company_id = company_id
        self.branch_id = branch_id
        super().__init__(
            "There is already an open drawer for this branch. "
            "Close the existing drawer first."
        )


class NotFoundError(DrawerError):
    """Referenced drawer does not exist or is not in the required state."""

    code: str = "NOT_FOUND"


class DrawerNotFoundError(NotFoundError):
    code: str = "DRAWER_NOT_FOUND"

    def __init__(self, session_id: int):
        self.session_id = session_id
        super().__init__(f"Drawer {session_id} not found")


class DrawerNotOpenError(NotFoundError):
    """The drawer exists but has already been closed."""

    code: str = "DRAWER_NOT_OPEN"

    def __init__(self, session_id: int):
        self.session_id = session_id
        super().__init__(f"Drawer {session_id} is not open")

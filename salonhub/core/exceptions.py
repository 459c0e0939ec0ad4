"""
Application error kinds raised by the service layer.

Each error carries the HTTP status and a short machine-readable code; the
handlers registered in ``salonhub.main`` render them as
``{"detail": message, "error": code}``.
"""
from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    """Missing or invalid input; nothing was changed"""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "bad_request"


class NotFoundError(AppError):
    """A referenced user or salon does not resolve"""
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class StoreError(AppError):
    """The store rejected a write; the transaction was rolled back"""
    code = "store_error"


class InconsistentStateError(AppError):
    """A multi-step write may have partially applied and needs reconciliation"""
    code = "inconsistent_state"

# common/utils/exceptions.py
"""Domain errors raised by services and translated to JSON responses in main.py."""

from typing import Any, Dict, List, Optional

from src.common.utils.global_messages import GlobalMessages


class ClinicError(Exception):
    """Base class for every error the API reports to its callers."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def public_message(self) -> str:
        return self.message


class ValidationError(ClinicError):
    status_code = 400


class ConflictError(ClinicError):
    status_code = 400


class InvalidStateError(ClinicError):
    status_code = 400


class NotFoundError(ClinicError):
    status_code = 404


class AuthError(ClinicError):
    status_code = 401


class StorageError(ClinicError):
    """Any database failure. The cause is logged, never sent to the client."""

    status_code = 500

    @property
    def public_message(self) -> str:
        return GlobalMessages.INTERNAL_ERROR

"""
Exception hierarchy for MediConnect.
"""


class MediConnectError(Exception):
    """Base class for all MediConnect errors."""


class ValidationError(MediConnectError, ValueError):
    """User input failed a client-side validation rule."""


class BackendError(MediConnectError):
    """A call to the managed backend failed (network, auth or store error)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DoctorNotFoundError(MediConnectError):
    """No doctor exists with the requested ID."""

    def __init__(self, doctor_id: str):
        super().__init__(f"Doctor not found: {doctor_id}")
        self.doctor_id = doctor_id

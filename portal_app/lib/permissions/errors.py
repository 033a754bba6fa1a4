"""
Error taxonomy for access-control decisions.

Evaluators never raise: they return capability sets. These exceptions are
raised by the guard helpers (``require_*``) and by the service layer that
applies decisions to project snapshots.
"""


class AccessControlError(RuntimeError):
    """
    Base class for access-control errors.

    Attributes:
        message -- explanation of the error
        status_code -- the HTTP status code the caller should answer with
    """
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class Unauthenticated(AccessControlError):
    """No subject could be resolved for the request."""
    status_code = 401


class Forbidden(AccessControlError):
    """Subject resolved, but the capability is denied."""
    status_code = 403


class InvalidOperation(AccessControlError):
    """The request cannot be applied as stated (caller bug)."""
    status_code = 400


class ResourceNotFound(AccessControlError):
    """A nested resource referenced by id is not in the loaded snapshot."""
    status_code = 404

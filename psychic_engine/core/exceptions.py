"""Core exception types shared across layers."""


class PsychicError(Exception):
    """Base class for failures that end an exchange with an apology."""


class UnrecognizedIntentError(PsychicError):
    """Raised when no handler is registered for the requested intent."""


class PermissionDeniedError(PsychicError):
    """Raised when the user declines a permission request."""


class StoreUnavailableError(PsychicError):
    """Raised when the user-record store cannot be read or written."""


class GeocodeError(PsychicError):
    """Base error for reverse-geocoding failures."""


class GeocodeServiceError(GeocodeError):
    """Raised when the geocoding service is unreachable or rejects the call."""


class GeocodeResolutionFailedError(GeocodeError):
    """Raised when the geocoder returns no address component tagged ``locality``."""


class UnrecognizedPermissionKindError(PsychicError):
    """Raised when a permission callback arrives for a fact we never requested."""


class MissingPlatformDataError(PsychicError):
    """Raised when a granted permission arrives without the data it should carry."""


__all__ = [
    "PsychicError",
    "UnrecognizedIntentError",
    "PermissionDeniedError",
    "StoreUnavailableError",
    "GeocodeError",
    "GeocodeServiceError",
    "GeocodeResolutionFailedError",
    "UnrecognizedPermissionKindError",
    "MissingPlatformDataError",
]

"""Chama domain exceptions."""


class ChamaError(Exception):
    """Base class for chama errors."""


class ChamaNotFoundError(ChamaError):
    """Raised when a chama id does not exist."""


class ChamaUnavailableError(ChamaError):
    """Raised when a chama can no longer be purchased."""

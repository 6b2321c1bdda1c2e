class DispatchorError(Exception):
    """Base error for dispatchor exceptions."""


class InvalidArgument(DispatchorError, TypeError):
    """Raised when a listener callback is not callable."""

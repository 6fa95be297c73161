"""Error taxonomy for fridge and recipe operations."""


class FridgeError(Exception):
    """Base class for expected, recoverable failures."""


class NotAuthenticated(FridgeError):
    """Raised when no current user can be resolved."""


class NoFridgeJoined(FridgeError):
    """Raised when the user has no fridge membership."""


class RemoteReadFailure(FridgeError):
    """Raised when a read from the data service fails."""


class RemoteWriteFailure(FridgeError):
    """Raised when a write to the data service fails."""


class ParseFailure(FridgeError):
    """Raised when a stored date or number cannot be parsed."""

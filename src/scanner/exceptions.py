class ScannerError(Exception):
    pass


class FeedError(ScannerError):
    """Observation could not be acquired this tick."""


class StoreError(ScannerError):
    """Persistence operation failed."""


class DeliveryError(ScannerError):
    """A single subscriber could not receive an event."""


class PolicyValidationError(ScannerError):
    """Policy override is malformed; the scan is not started."""

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

from typing import Iterable, List, Optional

# Error taxonomy shared by the catalog service, the SDK and the client.


class StoreError(Exception):
    """Base class for every recoverable storefront failure."""


class InvalidInput(StoreError):
    def __init__(self, message: str, fields: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.fields: List[str] = list(fields or [])


class NotFound(StoreError):
    pass


class UpstreamUnavailable(StoreError):
    pass

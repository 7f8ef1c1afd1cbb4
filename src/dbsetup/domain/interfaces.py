from typing import Callable, Optional, Protocol, runtime_checkable
from .models import Credentials, QueryResult

@runtime_checkable
class RemoteStoreClient(Protocol):
    """
    Issues read queries against named resources of a remote relational store.
    Store-side failures come back inside the QueryResult, they are not raised.
    A client may also expose `absent_phrases`, its backend's wording for a
    missing relation.
    """
    def query(self, resource: str, projection: str = "*", limit: int = 1) -> QueryResult:
        ...

    def close(self) -> None:
        ...

ClientFactory = Callable[[Credentials], RemoteStoreClient]

@runtime_checkable
class ConfigurationStore(Protocol):
    def save(self, credentials: Credentials) -> None:
        ...

    def load(self) -> Optional[Credentials]:
        ...

    def clear(self) -> None:
        ...

@runtime_checkable
class Notifier(Protocol):
    """Toast-style user notifications."""
    def success(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

V = TypeVar("V")
K = TypeVar("K")


class DataAccessError(RuntimeError):
    """A read against the database failed; callers are not expected to recover."""


class Table(ABC, Generic[V, K]):
    """CRUD contract for a single table whose rows map to V, keyed by K."""

    @property
    @abstractmethod
    def table_name(self) -> str: ...

    @abstractmethod
    def create_table(self) -> bool: ...

    @abstractmethod
    def drop_table(self) -> bool: ...

    @abstractmethod
    def find_by_primary_key(self, key: K) -> Optional[V]: ...

    @abstractmethod
    def find_all(self) -> List[V]: ...

    @abstractmethod
    def save(self, value: V) -> bool: ...

    @abstractmethod
    def update(self, value: V) -> bool: ...

    @abstractmethod
    def delete(self, key: K) -> bool: ...

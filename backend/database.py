from typing import Any, Callable, Dict, Iterator, Optional
import uuid


def new_id() -> str:
    return uuid.uuid4().hex


class Cursor:
    def __init__(self, collection: "Collection", predicate: Optional[Callable[[Any], bool]] = None,
                 limit: Optional[int] = None):
        self._collection = collection
        self._predicate = predicate
        self._limit = limit

    def __iter__(self) -> Iterator[Any]:
        # rescans on every iteration
        found = 0
        for record in tuple(self._collection._records.values()):
            if self._limit is not None and found >= self._limit:
                return
            if self._predicate is None or self._predicate(record):
                found += 1
                yield record

    def limit(self, n: int) -> "Cursor":
        return Cursor(self._collection, self._predicate, n)

    def first(self) -> Optional[Any]:
        return next(iter(self), None)


class Collection:
    def __init__(self, name: str, key: str = "id"):
        self.name = name
        self.key = key
        self._records: Dict[str, Any] = {}

    def _key(self, record: Any) -> str:
        return getattr(record, self.key)

    def insert(self, record: Any) -> Any:
        if self._key(record) in self._records:
            raise KeyError(f"duplicate id {self._key(record)!r} in {self.name}")
        self._records[self._key(record)] = record
        return record

    def replace(self, record: Any) -> Any:
        if self._key(record) not in self._records:
            raise KeyError(f"unknown id {self._key(record)!r} in {self.name}")
        self._records[self._key(record)] = record
        return record

    def get(self, record_id: str) -> Optional[Any]:
        return self._records.get(record_id)

    def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    def clear(self) -> None:
        self._records.clear()

    def find(self, predicate: Optional[Callable[[Any], bool]] = None) -> Cursor:
        return Cursor(self, predicate)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

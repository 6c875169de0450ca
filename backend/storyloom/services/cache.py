"""Fingerprint-keyed memoization for layout computations."""

import hashlib
import json
import threading
from collections import OrderedDict
from typing import Callable, Generic, TypeVar

from pydantic import BaseModel

from storyloom.logging import get_logger

logger = get_logger("services.cache")

RequestT = TypeVar("RequestT", bound=BaseModel)
ResultT = TypeVar("ResultT")


def fingerprint(request: BaseModel) -> str:
    """Structural SHA-256 of a request: equal inputs give equal fingerprints."""
    payload = request.model_dump(mode="json")
    return hashlib.sha256(
        json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    ).hexdigest()


class LayoutCache(Generic[RequestT, ResultT]):
    """
    Least-recently-used cache in front of a pure layout function.

    Results are shared between callers and must be treated as read-only.
    ``max_size=0`` disables caching; every call then recomputes.
    """

    def __init__(self, compute: Callable[[RequestT], ResultT], max_size: int = 32, name: str = "layout"):
        self._compute = compute
        self._max_size = max_size
        self._name = name
        self._entries: OrderedDict[str, ResultT] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, request: RequestT) -> ResultT:
        if self._max_size <= 0:
            self.misses += 1
            return self._compute(request)

        key = fingerprint(request)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached

        result = self._compute(request)

        with self._lock:
            self.misses += 1
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)
        logger.debug(f"{self._name} cache miss ({key[:12]}), {len(self._entries)} entries")
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict:
        with self._lock:
            return {
                "name": self._name,
                "size": len(self._entries),
                "max_size": self._max_size,
                "hits": self.hits,
                "misses": self.misses,
            }

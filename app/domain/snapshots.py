# app/domain/snapshots.py
"""
Wersjonowane snapshoty kolekcji i wartosci pochodne.

CollectionCache trzyma ostatni pelny snapshot kolekcji; kazdy nowy snapshot
podmienia calosc naraz (nigdy czesciowo) i podbija wersje.
Derived przelicza czysta funkcje, gdy zmieni sie wersja ktorejkolwiek zaleznosci.
"""
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from app.utils.logging import get_logger

logger = get_logger(__name__)


class CollectionCache:
    def __init__(self, name: str, order_key: Optional[Callable[[Any], Any]] = None):
        self.name = name
        self._order_key = order_key
        #(wersja, dokumenty) podmieniane jednym przypisaniem
        self._state: Tuple[int, Tuple[Any, ...]] = (0, ())

    @property
    def version(self) -> int:
        return self._state[0]

    @property
    def docs(self) -> Tuple[Any, ...]:
        return self._state[1]

    def snapshot(self) -> Tuple[int, Tuple[Any, ...]]:
        return self._state

    def replace(self, docs: Iterable[Any]) -> None:
        docs = list(docs)
        if self._order_key is not None:
            docs.sort(key=self._order_key)

        version = self._state[0] + 1
        self._state = (version, tuple(docs))
        logger.info(f"Snapshot {self.name} v{version}: {len(docs)} documents")

    #cache mozna podac wprost jako callback subskrypcji
    __call__ = replace


class Derived:
    def __init__(self, compute: Callable[..., Any], *deps: CollectionCache):
        self._compute = compute
        self._deps: Sequence[CollectionCache] = deps
        self._cached: Tuple[Optional[Tuple[int, ...]], Any] = (None, None)

    def get(self) -> Any:
        states = [dep.snapshot() for dep in self._deps]
        versions = tuple(version for version, _ in states)

        cached_versions, value = self._cached
        if versions != cached_versions:
            value = self._compute(*(docs for _, docs in states))
            self._cached = (versions, value)

        return value

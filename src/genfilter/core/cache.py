"""
genfilter Classification Cache

Session-scoped memoization of generated-code verdicts.  One
:class:`ClassificationCache` is created per analysis session and handed
by reference into every classification call; worker threads share it.

No lookup takes a lock.  Inserts go through :meth:`ClassificationCache.try_add`,
a single atomic ``dict.setdefault`` that keeps the first committed value,
so two threads that race on the same uncached unit both compute the
verdict but only one is stored.  Since the evaluator is pure, the losing
value is always equal to the stored one.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

from genfilter.core.config import GenfilterConfig
from genfilter.core.detector import classify
from genfilter.core.syntax import CancellationToken, SyntaxTree

logger = logging.getLogger(__name__)


class _LookupCounter:
    """Hit/miss tally owned by a single worker thread."""

    __slots__ = ("hits", "misses")

    def __init__(self):
        self.hits = 0
        self.misses = 0


class ClassificationCache:
    """Concurrent map from source-unit identity to verdict.

    Entries are keyed by ``id(unit)`` and hold the unit itself, so the
    host's ``__eq__``/``__hash__`` are never consulted and the id cannot
    be reused while the entry exists.  Entries are never removed or
    updated individually; :meth:`clear` is meant for the owning
    session's teardown only.

    Hit and miss counts are kept per thread (``threading.local``) and
    summed by :meth:`get_stats`.
    """

    def __init__(self):
        self._entries: Dict[int, Tuple[SyntaxTree, bool]] = {}
        self._local = threading.local()
        self._counters: List[_LookupCounter] = []
        self._counters_lock = threading.Lock()

    def try_get(self, unit: SyntaxTree) -> Optional[bool]:
        """Return the stored verdict for *unit*, or ``None`` if absent."""
        entry = self._entries.get(id(unit))
        if entry is None or entry[0] is not unit:
            return None
        return entry[1]

    def try_add(self, unit: SyntaxTree, verdict: bool) -> bool:
        """Store *verdict* unless a value is already present.

        Returns ``True`` if this call committed the entry.
        """
        entry = (unit, verdict)
        return self._entries.setdefault(id(unit), entry) is entry

    def clear(self) -> None:
        self._entries.clear()
        with self._counters_lock:
            for counter in self._counters:
                counter.hits = 0
                counter.misses = 0

    def _get_counter(self) -> _LookupCounter:
        """Return this thread's counter, registering it on first use."""
        counter = getattr(self._local, "counter", None)
        if counter is None:
            counter = _LookupCounter()
            with self._counters_lock:
                self._counters.append(counter)
            self._local.counter = counter
        return counter

    def record_lookup(self, hit: bool) -> None:
        counter = self._get_counter()
        if hit:
            counter.hits += 1
        else:
            counter.misses += 1

    def get_stats(self) -> Dict[str, int]:
        """Get cache statistics (entries, generated units, hits and misses)."""
        entries = tuple(self._entries.values())
        with self._counters_lock:
            counters = tuple(self._counters)
        return {
            "entries": len(entries),
            "generated": sum(1 for _, verdict in entries if verdict),
            "hits": sum(c.hits for c in counters),
            "misses": sum(c.misses for c in counters),
        }

    def __contains__(self, unit: object) -> bool:
        entry = self._entries.get(id(unit))
        return entry is not None and entry[0] is unit

    def __len__(self) -> int:
        return len(self._entries)


def is_generated_document(
    unit: Optional[SyntaxTree],
    cache: ClassificationCache,
    cancellation_token: Optional[CancellationToken] = None,
    config: Optional[GenfilterConfig] = None,
) -> bool:
    """
    Check whether *unit* is generated code, memoizing the verdict in *cache*.

    Returns ``False`` for a ``None`` unit without touching the cache.  On
    a miss the verdict is computed by :func:`~genfilter.core.detector.classify`
    and then stored best-effort; if another thread stored one first, this
    call's value is discarded.  A cancelled computation raises
    :class:`~genfilter.exceptions.OperationCancelledError` and stores
    nothing.

    A cache is assumed to be used with a single *config* for its whole
    lifetime.
    """
    if unit is None:
        return False

    result = cache.try_get(unit)
    if result is not None:
        cache.record_lookup(hit=True)
        return result

    cache.record_lookup(hit=False)
    generated = classify(unit, cancellation_token, config)
    if not cache.try_add(unit, generated):
        logger.debug(f"{unit.file_path}: verdict already cached by another worker")
    return generated

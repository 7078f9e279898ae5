"""
genfilter Session Facade

Single entry point for hosts that want generated-code filtering without
wiring caches and tokens by hand.  A session owns exactly one
classification cache and one cancellation token for its lifetime; the
cache starts empty and is discarded when the session closes.

Usage::

    from genfilter import ClassificationSession

    with ClassificationSession() as session:
        unit = session.load_unit("Form1.Designer.cs")
        if session.classify(unit):
            ...  # skip analysis

        result = session.scan("./src", show_progress=True)
        print(f"{len(result.generated)} generated files")
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from genfilter.core.adapters import (
    SyntaxNodeAnalysisContext,
    SyntaxTreeAnalysisContext,
    is_generated,
    is_generated_document_context,
)
from genfilter.core.cache import ClassificationCache
from genfilter.core.config import GenfilterConfig
from genfilter.core.scanner import ScanPipeline, ScanResult, scan_directory
from genfilter.core.syntax import CancellationToken, SourceUnit, SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)


class ClassificationSession:
    """
    One analysis pass over a fixed set of source units.

    Units loaded through :meth:`load_unit` are interned by resolved path,
    so repeated lookups of the same file hit the same cache entry.  All
    methods are safe to call from several worker threads.

    Args:
        config: Explicit configuration.  When *None*, built from
            environment variables.
        cancellation_token: Token shared with the host.  When *None*, the
            session creates its own; :meth:`cancel` triggers it.
    """

    def __init__(
        self,
        config: GenfilterConfig | None = None,
        cancellation_token: CancellationToken | None = None,
    ):
        self._config = config if config is not None else GenfilterConfig.from_env()
        self._config.validate()
        self._token = cancellation_token if cancellation_token is not None else CancellationToken()
        self._cache = ClassificationCache()
        self._units: Dict[Path, SourceUnit] = {}
        self._units_lock = threading.Lock()

    # ── Properties ────────────────────────────────────────────────

    @property
    def config(self) -> GenfilterConfig:
        return self._config

    @property
    def cache(self) -> ClassificationCache:
        return self._cache

    @property
    def cancellation_token(self) -> CancellationToken:
        return self._token

    # ── Units ─────────────────────────────────────────────────────

    def load_unit(self, path: str | Path) -> SourceUnit:
        """Return the session's unit for *path*, reading it on first use.

        Raises :class:`~genfilter.exceptions.SourceReadError` if the file
        cannot be read.
        """
        key = Path(path).resolve()
        unit = self._units.get(key)
        if unit is not None:
            return unit
        loaded = SourceUnit.from_path(key, encoding=self._config.source_encoding)
        with self._units_lock:
            return self._units.setdefault(key, loaded)

    # ── Classification ────────────────────────────────────────────

    def classify(self, unit: Optional[SyntaxTree]) -> bool:
        """Check whether *unit* is generated (``False`` for ``None``)."""
        context = SyntaxTreeAnalysisContext(unit, self._token)
        return is_generated_document_context(context, self._cache, self._config)

    def classify_node(self, node: Optional[SyntaxNode]) -> bool:
        """Check whether the unit containing *node* is generated."""
        context = SyntaxNodeAnalysisContext(node, self._token)
        return is_generated(context, self._cache, self._config)

    def classify_path(self, path: str | Path) -> bool:
        return self.classify(self.load_unit(path))

    def scan(self, directory: str | Path, *, show_progress: bool = False) -> ScanResult:
        """Classify every source file under *directory*."""
        root = Path(directory).resolve()
        files = scan_directory(root, self._config)
        return ScanPipeline(self, show_progress=show_progress).run(files, root_dir=root)

    # ── Lifecycle ─────────────────────────────────────────────────

    def cancel(self) -> None:
        """Request cancellation of all in-flight and future classifications."""
        logger.info("Cancellation requested")
        self._token.cancel()

    def stats(self) -> dict:
        """Return cache statistics plus the number of loaded units."""
        stats = self._cache.get_stats()
        stats["units_loaded"] = len(self._units)
        return stats

    def close(self) -> None:
        """End the session, discarding the cache and loaded units. Idempotent."""
        self._cache.clear()
        with self._units_lock:
            self._units.clear()

    def __enter__(self) -> "ClassificationSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

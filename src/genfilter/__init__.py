"""
genfilter — fast, cached detection of generated source code.

Analyzers call ``genfilter`` before running a rule against a source unit
to skip code that a tool produced (``*.designer.cs`` files, files whose
header comment says ``<auto-generated>``, and empty files).  Verdicts
are memoized per unit in a session-scoped cache shared by all worker
threads.

Quick start (programmatic API)::

    from genfilter import ClassificationCache, SourceUnit, is_generated_document

    cache = ClassificationCache()                      # one per analysis session
    unit = SourceUnit.from_text("// <auto-generated/>\\nclass C {}", "C.cs")
    is_generated_document(unit, cache)                 # True, and cached

Quick start (CLI)::

    genfilter check Form1.Designer.cs Program.cs
    genfilter scan ./src --only generated
"""

__version__ = "1.0.0"

# Core entry points
from genfilter.core.adapters import (
    SyntaxNodeAnalysisContext,
    SyntaxTreeAnalysisContext,
    is_generated,
    is_generated_document_context,
)
from genfilter.core.cache import ClassificationCache, is_generated_document

# Configuration
from genfilter.core.config import GenfilterConfig

# Syntax model
from genfilter.core.syntax import CancellationToken, SourceUnit, SyntaxNode

# Session facade
from genfilter.core.scanner import ScanResult
from genfilter.session import ClassificationSession

# Exception hierarchy
from genfilter.exceptions import (
    ConfigError,
    GenfilterError,
    OperationCancelledError,
    SourceReadError,
)


def health(config: GenfilterConfig | None = None) -> dict:
    """
    Return a small status dict for tooling health checks (no file access).

    When *config* is None, uses :meth:`GenfilterConfig.from_env()` for the snapshot.
    """
    cfg = config or GenfilterConfig.from_env()
    return {
        "version": __version__,
        "generated_file_patterns": list(cfg.generated_file_patterns),
        "header_markers": list(cfg.header_markers),
        "max_workers": cfg.max_workers,
    }


__all__ = [
    "__version__",
    # Core
    "is_generated_document",
    "is_generated",
    "is_generated_document_context",
    "ClassificationCache",
    "SyntaxNodeAnalysisContext",
    "SyntaxTreeAnalysisContext",
    # Syntax
    "SourceUnit",
    "SyntaxNode",
    "CancellationToken",
    # Session
    "ClassificationSession",
    "ScanResult",
    # Config
    "GenfilterConfig",
    # Exceptions
    "GenfilterError",
    "ConfigError",
    "OperationCancelledError",
    "SourceReadError",
    # Status
    "health",
]

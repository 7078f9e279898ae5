"""
genfilter Core — syntax model, heuristics, cache, adapters and scanning.

Re-exports the primary names for convenience::

    from genfilter.core import ClassificationCache, classify, is_generated_document
"""

from genfilter.core.adapters import (
    SyntaxNodeAnalysisContext,
    SyntaxTreeAnalysisContext,
    is_generated,
    is_generated_document_context,
)
from genfilter.core.cache import ClassificationCache, is_generated_document
from genfilter.core.config import DEFAULT_CONFIG, GenfilterConfig
from genfilter.core.detector import (
    classify,
    has_auto_generated_comment,
    is_empty,
    is_generated_file_name,
)
from genfilter.core.scanner import ScanPipeline, ScanResult, scan_directory
from genfilter.core.syntax import (
    CancellationToken,
    SourceUnit,
    SyntaxNode,
    SyntaxToken,
    SyntaxTree,
    SyntaxTrivia,
    TokenKind,
    TriviaKind,
)

__all__ = [
    "SyntaxNodeAnalysisContext",
    "SyntaxTreeAnalysisContext",
    "is_generated",
    "is_generated_document_context",
    "ClassificationCache",
    "is_generated_document",
    "DEFAULT_CONFIG",
    "GenfilterConfig",
    "classify",
    "has_auto_generated_comment",
    "is_empty",
    "is_generated_file_name",
    "ScanPipeline",
    "ScanResult",
    "scan_directory",
    "CancellationToken",
    "SourceUnit",
    "SyntaxNode",
    "SyntaxToken",
    "SyntaxTree",
    "SyntaxTrivia",
    "TokenKind",
    "TriviaKind",
]

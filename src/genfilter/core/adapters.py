"""
Context adapters between the host's analysis callbacks and the cache.

A host invokes rules with one of two context shapes: a node of interest
inside a unit, or a whole unit.  Both carry a cancellation token.  The
adapters only pull the unit and token out and delegate to
:func:`~genfilter.core.cache.is_generated_document`.
"""

from dataclasses import dataclass, field
from typing import Optional

from genfilter.core.cache import ClassificationCache, is_generated_document
from genfilter.core.config import GenfilterConfig
from genfilter.core.syntax import CancellationToken, SyntaxNode, SyntaxTree


@dataclass(frozen=True)
class SyntaxNodeAnalysisContext:
    """Analysis context for a node of interest."""
    node: Optional[SyntaxNode]
    cancellation_token: CancellationToken = field(default_factory=CancellationToken.none)


@dataclass(frozen=True)
class SyntaxTreeAnalysisContext:
    """Analysis context for a whole source unit."""
    tree: Optional[SyntaxTree]
    cancellation_token: CancellationToken = field(default_factory=CancellationToken.none)


def is_generated(
    context: SyntaxNodeAnalysisContext,
    cache: ClassificationCache,
    config: Optional[GenfilterConfig] = None,
) -> bool:
    """Check whether the node in *context*, or rather its containing unit, is generated."""
    unit = context.node.syntax_tree if context.node is not None else None
    return is_generated_document(unit, cache, context.cancellation_token, config)


def is_generated_document_context(
    context: SyntaxTreeAnalysisContext,
    cache: ClassificationCache,
    config: Optional[GenfilterConfig] = None,
) -> bool:
    """Check whether the unit in *context* is generated."""
    return is_generated_document(context.tree, cache, context.cancellation_token, config)

"""
genfilter Heuristic Evaluator

Decides whether one source unit is generated code.  A unit is
considered generated if it meets any of the following conditions,
checked cheapest first:

* its file name matches a generated-file pattern (``*.designer.cs``,
  case-insensitive, directories ignored);
* its header comment, i.e. a comment in the leading trivia of the first
  token, contains ``<auto-generated`` or ``<autogenerated``;
* it contains only whitespace.

The exact conditions are subject to change in future releases.  The
evaluator is pure and touches no shared state; memoization lives in
:mod:`genfilter.core.cache`.
"""

import logging
import os
import re
from typing import Optional

from genfilter.core.config import DEFAULT_CONFIG, GenfilterConfig
from genfilter.core.syntax import (
    CancellationToken,
    SyntaxTree,
    TokenKind,
    TriviaKind,
    first_non_whitespace_trivia_index,
)

logger = logging.getLogger(__name__)

_HEADER_COMMENT_KINDS = (TriviaKind.SINGLE_LINE_COMMENT, TriviaKind.MULTI_LINE_COMMENT)


def classify(
    unit: SyntaxTree,
    cancellation_token: Optional[CancellationToken] = None,
    config: Optional[GenfilterConfig] = None,
) -> bool:
    """
    Return ``True`` if *unit* looks generated, without consulting any cache.

    *cancellation_token* is polled before each heuristic; a requested
    cancellation raises :class:`~genfilter.exceptions.OperationCancelledError`
    instead of returning a verdict.
    """
    cfg = config or DEFAULT_CONFIG
    token = cancellation_token or CancellationToken.none()

    token.throw_if_cancellation_requested()
    if is_generated_file_name(unit.file_path, cfg):
        logger.debug(f"{unit.file_path}: generated (file name)")
        return True

    token.throw_if_cancellation_requested()
    if has_auto_generated_comment(unit, cfg):
        logger.debug(f"{unit.file_path}: generated (header comment)")
        return True

    token.throw_if_cancellation_requested()
    if is_empty(unit):
        logger.debug(f"{unit.file_path}: generated (empty)")
        return True

    return False


def is_generated_file_name(file_path: Optional[str], config: Optional[GenfilterConfig] = None) -> bool:
    """Check whether the base name of *file_path* marks a generated file.

    Both ``/`` and ``\\`` are treated as directory separators.  An empty
    or missing path never matches.
    """
    if not file_path:
        return False
    cfg = config or DEFAULT_CONFIG
    file_name = os.path.basename(file_path.replace("\\", "/"))
    return any(
        re.search(pattern, file_name, re.IGNORECASE)
        for pattern in cfg.generated_file_patterns
    )


def has_auto_generated_comment(unit: SyntaxTree, config: Optional[GenfilterConfig] = None) -> bool:
    """Check whether *unit* starts with a comment carrying a generated-code marker.

    Only the leading trivia of the first token is examined (the
    end-of-file token's, for a unit with no tokens).  Within it only
    plain single-line and multi-line comments count; documentation
    comments, directives and whitespace are skipped.
    """
    cfg = config or DEFAULT_CONFIG
    token = unit.get_first_token()
    if token is None:
        token = unit.end_of_file_token
    if not token.has_leading_trivia:
        return False

    for trivia in token.leading_trivia:
        if not trivia.is_kind(*_HEADER_COMMENT_KINDS):
            continue
        text = str(trivia)
        if any(marker in text for marker in cfg.header_markers):
            return True
    return False


def is_empty(unit: SyntaxTree) -> bool:
    """Check whether *unit* contains nothing but whitespace.

    We don't want to analyze empty files.
    """
    first_token = unit.get_first_token(include_zero_width=True)
    return (
        first_token is not None
        and first_token.is_kind(TokenKind.END_OF_FILE)
        and first_non_whitespace_trivia_index(first_token.leading_trivia) == -1
    )

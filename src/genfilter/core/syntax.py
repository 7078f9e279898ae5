"""
genfilter Syntax Model

The minimal syntax surface the generated-code heuristics consume: a
source unit identified by object identity, its first substantive token,
its end-of-file token, and the leading trivia attached to each.

:class:`SourceUnit` is a host-side reference implementation that lexes
C#-style leading trivia (whitespace, line breaks, ``//`` and ``/* */``
comments, documentation comments, preprocessor directive lines and
disabled text).  Only literal ``true``/``false`` conditions are
evaluated, so ``#if false`` bodies and the ``#else`` of ``#if true`` are
disabled; branches on host-defined symbols are lexed as live.  Lexing
stops at the first substantive
token; nothing after it is ever inspected.  Any host object satisfying
:class:`SyntaxTree` can be classified instead.
"""

import enum
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from genfilter.exceptions import OperationCancelledError, SourceReadError

logger = logging.getLogger(__name__)

_BYTE_ORDER_MARK = "\ufeff"
_LINE_BREAKS = ("\r\n", "\r", "\n", "\u0085", "\u2028", "\u2029")


# =============================================================================
# Trivia and Tokens
# =============================================================================

class TriviaKind(enum.Enum):
    WHITESPACE = "whitespace"
    END_OF_LINE = "end_of_line"
    SINGLE_LINE_COMMENT = "single_line_comment"
    MULTI_LINE_COMMENT = "multi_line_comment"
    SINGLE_LINE_DOCUMENTATION_COMMENT = "single_line_documentation_comment"
    MULTI_LINE_DOCUMENTATION_COMMENT = "multi_line_documentation_comment"
    DIRECTIVE = "directive"
    DISABLED_TEXT = "disabled_text"


class TokenKind(enum.Enum):
    TOKEN = "token"
    END_OF_FILE = "end_of_file"


@dataclass(frozen=True)
class SyntaxTrivia:
    """A piece of non-semantic source text attached to a token."""
    kind: TriviaKind
    text: str

    def is_kind(self, *kinds: TriviaKind) -> bool:
        return self.kind in kinds

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class SyntaxToken:
    """A lexical token together with the trivia that precedes it.

    The end-of-file token is zero-width: it carries no text of its own,
    only the trivia between the last token (if any) and the end of input.
    """
    kind: TokenKind
    text: str = ""
    leading_trivia: Tuple[SyntaxTrivia, ...] = ()

    @property
    def has_leading_trivia(self) -> bool:
        return bool(self.leading_trivia)

    @property
    def is_zero_width(self) -> bool:
        return not self.text

    def is_kind(self, kind: TokenKind) -> bool:
        return self.kind is kind


def first_non_whitespace_trivia_index(trivia: Sequence[SyntaxTrivia]) -> int:
    """Return the index of the first trivia that is not whitespace or a
    line break, or ``-1`` when the list holds only such trivia."""
    for index, item in enumerate(trivia):
        if not item.is_kind(TriviaKind.WHITESPACE, TriviaKind.END_OF_LINE):
            return index
    return -1


# =============================================================================
# Source Units
# =============================================================================

class SyntaxTree(Protocol):
    """What the heuristics need from a host's parsed source unit.

    Implementations must be immutable.  The classification cache keys on
    object identity, so neither hashability nor value equality is needed.
    """

    @property
    def file_path(self) -> Optional[str]: ...

    @property
    def end_of_file_token(self) -> SyntaxToken: ...

    def get_first_token(self, include_zero_width: bool = False) -> Optional[SyntaxToken]: ...


class SourceUnit:
    """
    One source file's leading-token structure.

    Equality and hashing are inherited from ``object``, so two units with
    identical text are still distinct cache keys.  Build instances with
    :meth:`from_text` or :meth:`from_path`.
    """

    __slots__ = ("_file_path", "_text", "_first_token", "_end_of_file_token")

    def __init__(
        self,
        file_path: Optional[str],
        text: str,
        first_token: Optional[SyntaxToken],
        end_of_file_token: SyntaxToken,
    ):
        self._file_path = file_path
        self._text = text
        self._first_token = first_token
        self._end_of_file_token = end_of_file_token

    @classmethod
    def from_text(cls, text: str, file_path: Optional[str] = None) -> "SourceUnit":
        """Lex the leading trivia of *text* into a new unit.

        When the text holds no substantive token, all of its trivia is
        attached to the end-of-file token.  Otherwise the trivia belongs
        to the first token and the end-of-file token's trivia is left
        empty, since nothing past the first token is lexed.
        """
        if text.startswith(_BYTE_ORDER_MARK):
            text = text[1:]
        trivia, token_text = _lex_leading_trivia(text)
        if token_text is None:
            return cls(
                file_path, text, None,
                SyntaxToken(TokenKind.END_OF_FILE, "", trivia),
            )
        return cls(
            file_path, text,
            SyntaxToken(TokenKind.TOKEN, token_text, trivia),
            SyntaxToken(TokenKind.END_OF_FILE),
        )

    @classmethod
    def from_path(cls, path: Union[str, Path], encoding: str = "utf-8-sig") -> "SourceUnit":
        """Read *path* from disk and lex it. Raises :class:`SourceReadError`."""
        path = Path(path)
        try:
            text = path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(f"Cannot read {path}: {exc}") from exc
        return cls.from_text(text, str(path))

    @property
    def file_path(self) -> Optional[str]:
        return self._file_path

    @property
    def text(self) -> str:
        return self._text

    @property
    def end_of_file_token(self) -> SyntaxToken:
        return self._end_of_file_token

    def get_first_token(self, include_zero_width: bool = False) -> Optional[SyntaxToken]:
        """Return the first substantive token.

        With *include_zero_width*, a unit without substantive tokens
        yields its end-of-file token instead of ``None``.
        """
        if self._first_token is not None:
            return self._first_token
        return self._end_of_file_token if include_zero_width else None

    def __repr__(self) -> str:
        return f"SourceUnit(file_path={self._file_path!r}, length={len(self._text)})"


@dataclass(eq=False)
class SyntaxNode:
    """A node of interest handed to a rule; only its owning unit matters here."""
    syntax_tree: Optional[SyntaxTree]
    kind: str = ""


# =============================================================================
# Cancellation
# =============================================================================

class CancellationToken:
    """Cooperative cancellation flag, polled by long-running work.

    Backed by a :class:`threading.Event` so that any thread may request
    cancellation and every worker observes it at its next checkpoint.
    """

    __slots__ = ("_event",)

    def __init__(self, event: Optional[threading.Event] = None):
        self._event = event if event is not None else threading.Event()

    @classmethod
    def none(cls) -> "CancellationToken":
        """A fresh token nobody else holds, hence never cancelled."""
        return cls()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def throw_if_cancellation_requested(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError("The operation was cancelled.")


# =============================================================================
# Leading-trivia lexer
# =============================================================================

def _line_break_at(text: str, pos: int) -> int:
    """Length of the line break starting at *pos*, or 0."""
    for brk in _LINE_BREAKS:
        if text.startswith(brk, pos):
            return len(brk)
    return 0


def _end_of_line(text: str, pos: int) -> int:
    """Index of the first line break at or after *pos* (or ``len(text)``)."""
    end = len(text)
    while pos < end and not _line_break_at(text, pos):
        pos += 1
    return pos


def _is_inline_whitespace(ch: str) -> bool:
    return ch.isspace() and not _line_break_at(ch, 0)


def _skip_disabled_text(text: str, pos: int, stop_at_else: bool) -> int:
    """Advance past disabled lines up to the directive that closes the run.

    The run ends at an ``#endif`` at depth 0, and also at ``#else`` or
    ``#elif`` when *stop_at_else* is set (a false branch whose siblings
    may still be live).
    """
    end = len(text)
    depth = 0
    while pos < end:
        line_end = _end_of_line(text, pos)
        directive = text[pos:line_end].lstrip()
        if directive.startswith("#"):
            keyword = directive[1:].lstrip().split(None, 1)
            word = keyword[0] if keyword else ""
            if word == "if":
                depth += 1
            elif word == "endif":
                if depth == 0:
                    return pos
                depth -= 1
            elif word in ("else", "elif") and depth == 0 and stop_at_else:
                return pos
        pos = line_end + _line_break_at(text, line_end)
    return pos


def _literal_condition(words: List[str]) -> Optional[bool]:
    """``True``/``False`` for a literal ``true``/``false`` condition, else ``None``."""
    if len(words) >= 2 and words[1] in ("true", "false"):
        return words[1] == "true"
    return None


def _track_conditional(directive: str, branches: List[Optional[bool]]) -> Optional[bool]:
    """Update the ``#if`` branch stack for *directive*.

    Each stack entry records whether a branch of that conditional is
    already live: ``True``/``False`` for literal conditions, ``None`` when
    the condition depends on host-defined symbols.  Returns ``None`` when
    the lines that follow are live, otherwise whether the disabled run
    may end at a sibling ``#else``/``#elif``.
    """
    words = directive[1:].split()
    keyword = words[0] if words else ""

    if keyword == "if":
        condition = _literal_condition(words)
        branches.append(condition)
        return True if condition is False else None

    if keyword in ("elif", "else") and branches:
        taken = branches[-1]
        if taken is True:
            return False
        if taken is False:
            condition = True if keyword == "else" else _literal_condition(words)
            branches[-1] = condition
            return True if condition is False else None
        return None

    if keyword == "endif" and branches:
        branches.pop()
    return None


def _lex_leading_trivia(text: str) -> Tuple[Tuple[SyntaxTrivia, ...], Optional[str]]:
    """Split *text* into the trivia before its first token and that token's text.

    The token text is ``None`` when the input contains only trivia.
    """
    trivia = []
    pos = 0
    end = len(text)
    at_line_start = True
    branches: List[Optional[bool]] = []

    while pos < end:
        ch = text[pos]

        brk = _line_break_at(text, pos)
        if brk:
            trivia.append(SyntaxTrivia(TriviaKind.END_OF_LINE, text[pos:pos + brk]))
            pos += brk
            at_line_start = True
            continue

        if _is_inline_whitespace(ch):
            start = pos
            while pos < end and _is_inline_whitespace(text[pos]):
                pos += 1
            trivia.append(SyntaxTrivia(TriviaKind.WHITESPACE, text[start:pos]))
            continue

        if text.startswith("//", pos):
            line_end = _end_of_line(text, pos)
            is_doc = text.startswith("///", pos) and not text.startswith("////", pos)
            kind = (TriviaKind.SINGLE_LINE_DOCUMENTATION_COMMENT if is_doc
                    else TriviaKind.SINGLE_LINE_COMMENT)
            trivia.append(SyntaxTrivia(kind, text[pos:line_end]))
            pos = line_end
            continue

        if text.startswith("/*", pos):
            close = text.find("*/", pos + 2)
            stop = end if close == -1 else close + 2
            is_doc = text.startswith("/**", pos) and not text.startswith("/**/", pos)
            kind = (TriviaKind.MULTI_LINE_DOCUMENTATION_COMMENT if is_doc
                    else TriviaKind.MULTI_LINE_COMMENT)
            trivia.append(SyntaxTrivia(kind, text[pos:stop]))
            pos = stop
            at_line_start = False
            continue

        if ch == "#" and at_line_start:
            line_end = _end_of_line(text, pos)
            directive = text[pos:line_end]
            trivia.append(SyntaxTrivia(TriviaKind.DIRECTIVE, directive))
            pos = line_end
            stop_at_else = _track_conditional(directive, branches)
            if stop_at_else is not None:
                brk = _line_break_at(text, pos)
                if brk:
                    trivia.append(SyntaxTrivia(TriviaKind.END_OF_LINE, text[pos:pos + brk]))
                    pos += brk
                stop = _skip_disabled_text(text, pos, stop_at_else)
                if stop > pos:
                    trivia.append(SyntaxTrivia(TriviaKind.DISABLED_TEXT, text[pos:stop]))
                pos = stop
            continue

        line_end = pos
        while line_end < end and not text[line_end].isspace():
            line_end += 1
        return tuple(trivia), text[pos:line_end]

    return tuple(trivia), None

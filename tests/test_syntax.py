"""
Tests for genfilter.core.syntax — leading-trivia lexing, source units,
and cancellation tokens.
"""

from concurrent.futures import CancelledError

import pytest
from genfilter.core.syntax import (
    CancellationToken,
    SourceUnit,
    SyntaxTrivia,
    TokenKind,
    TriviaKind,
    first_non_whitespace_trivia_index,
)
from genfilter.exceptions import OperationCancelledError, SourceReadError


def _kinds(unit: SourceUnit):
    token = unit.get_first_token(include_zero_width=True)
    return [t.kind for t in token.leading_trivia]


# =============================================================================
# Lexing leading trivia
# =============================================================================

class TestLeadingTrivia:
    """The lexer splits everything before the first token into trivia."""

    def test_comment_then_token(self):
        unit = SourceUnit.from_text("// hi\nclass C {}")
        token = unit.get_first_token()
        assert token.kind is TokenKind.TOKEN
        assert token.text == "class"
        assert [str(t) for t in token.leading_trivia] == ["// hi", "\n"]

    def test_byte_order_mark_is_dropped(self):
        unit = SourceUnit.from_text("\ufeff// x\nclass C")
        first = unit.get_first_token().leading_trivia[0]
        assert first == SyntaxTrivia(TriviaKind.SINGLE_LINE_COMMENT, "// x")

    def test_crlf_is_one_line_break(self):
        unit = SourceUnit.from_text("\r\nclass C")
        assert _kinds(unit) == [TriviaKind.END_OF_LINE]
        assert str(unit.get_first_token().leading_trivia[0]) == "\r\n"

    def test_whitespace_run(self):
        unit = SourceUnit.from_text(" \t class C")
        assert _kinds(unit) == [TriviaKind.WHITESPACE]

    @pytest.mark.parametrize("text,kind", [
        ("// plain\nclass C", TriviaKind.SINGLE_LINE_COMMENT),
        ("//// banner\nclass C", TriviaKind.SINGLE_LINE_COMMENT),
        ("/// <summary/>\nclass C", TriviaKind.SINGLE_LINE_DOCUMENTATION_COMMENT),
        ("/* block */ class C", TriviaKind.MULTI_LINE_COMMENT),
        ("/**/ class C", TriviaKind.MULTI_LINE_COMMENT),
        ("/** doc */ class C", TriviaKind.MULTI_LINE_DOCUMENTATION_COMMENT),
        ("#region R\nclass C", TriviaKind.DIRECTIVE),
    ])
    def test_first_trivia_kind(self, text, kind):
        unit = SourceUnit.from_text(text)
        assert _kinds(unit)[0] is kind

    def test_multi_line_comment_spans_lines(self):
        unit = SourceUnit.from_text("/* a\n b\n*/\nclass C")
        first = unit.get_first_token().leading_trivia[0]
        assert first.text == "/* a\n b\n*/"

    def test_unterminated_block_comment_runs_to_end(self):
        unit = SourceUnit.from_text("/* never closed\nclass C")
        assert unit.get_first_token() is None
        assert _kinds(unit) == [TriviaKind.MULTI_LINE_COMMENT]

    def test_indented_directive(self):
        unit = SourceUnit.from_text("  #pragma warning disable\nclass C")
        assert _kinds(unit)[:2] == [TriviaKind.WHITESPACE, TriviaKind.DIRECTIVE]

    def test_hash_after_block_comment_is_a_token(self):
        unit = SourceUnit.from_text("/* c */ #if X")
        assert unit.get_first_token().text == "#if"

    def test_disabled_text(self):
        unit = SourceUnit.from_text(
            "#if false\n// <auto-generated/>\n#endif\nclass C"
        )
        assert _kinds(unit) == [
            TriviaKind.DIRECTIVE,
            TriviaKind.END_OF_LINE,
            TriviaKind.DISABLED_TEXT,
            TriviaKind.DIRECTIVE,
            TriviaKind.END_OF_LINE,
        ]
        assert unit.get_first_token().text == "class"

    def test_nested_if_inside_disabled_text(self):
        unit = SourceUnit.from_text(
            "#if false\n#if DEBUG\nx\n#endif\ny\n#else\nclass C"
        )
        trivia = unit.get_first_token().leading_trivia
        disabled = [t for t in trivia if t.is_kind(TriviaKind.DISABLED_TEXT)]
        assert disabled[0].text == "#if DEBUG\nx\n#endif\ny\n"
        assert unit.get_first_token().text == "class"

    def test_else_of_if_true_is_disabled(self):
        unit = SourceUnit.from_text(
            "#if true\n#else\n// <auto-generated/>\n#endif\nclass C"
        )
        assert _kinds(unit) == [
            TriviaKind.DIRECTIVE,
            TriviaKind.END_OF_LINE,
            TriviaKind.DIRECTIVE,
            TriviaKind.END_OF_LINE,
            TriviaKind.DISABLED_TEXT,
            TriviaKind.DIRECTIVE,
            TriviaKind.END_OF_LINE,
        ]
        trivia = unit.get_first_token().leading_trivia
        assert trivia[4].text == "// <auto-generated/>\n"

    def test_elif_after_taken_branch_is_disabled(self):
        unit = SourceUnit.from_text(
            "#if true\n#elif true\n// a\n#else\n// b\n#endif\nclass C"
        )
        trivia = unit.get_first_token().leading_trivia
        disabled = [t for t in trivia if t.is_kind(TriviaKind.DISABLED_TEXT)]
        assert [t.text for t in disabled] == ["// a\n#else\n// b\n"]

    def test_else_of_if_false_is_live(self):
        unit = SourceUnit.from_text("#if false\nx\n#else\n// c\n#endif\nclass C")
        trivia = unit.get_first_token().leading_trivia
        disabled = [t for t in trivia if t.is_kind(TriviaKind.DISABLED_TEXT)]
        comments = [t for t in trivia if t.is_kind(TriviaKind.SINGLE_LINE_COMMENT)]
        assert [t.text for t in disabled] == ["x\n"]
        assert [t.text for t in comments] == ["// c"]

    def test_symbol_conditions_are_live(self):
        unit = SourceUnit.from_text("#if DEBUG\n// a\n#else\n// b\n#endif\nclass C")
        kinds = _kinds(unit)
        assert TriviaKind.DISABLED_TEXT not in kinds
        assert kinds.count(TriviaKind.SINGLE_LINE_COMMENT) == 2


# =============================================================================
# SourceUnit
# =============================================================================

class TestSourceUnit:
    """Units expose first / end-of-file tokens and compare by identity."""

    def test_empty_text_has_no_first_token(self):
        unit = SourceUnit.from_text("")
        assert unit.get_first_token() is None
        assert unit.get_first_token(include_zero_width=True) is unit.end_of_file_token
        assert unit.end_of_file_token.is_zero_width
        assert not unit.end_of_file_token.has_leading_trivia

    def test_trivia_only_text_attaches_to_end_of_file(self):
        unit = SourceUnit.from_text("// only a comment\n")
        eof = unit.end_of_file_token
        assert eof.kind is TokenKind.END_OF_FILE
        assert [t.kind for t in eof.leading_trivia] == [
            TriviaKind.SINGLE_LINE_COMMENT, TriviaKind.END_OF_LINE,
        ]

    def test_identity_not_text_equality(self):
        a = SourceUnit.from_text("class C {}", "C.cs")
        b = SourceUnit.from_text("class C {}", "C.cs")
        assert a != b
        assert len({a, b}) == 2
        assert a == a

    def test_file_path_may_be_none(self):
        assert SourceUnit.from_text("class C").file_path is None

    def test_from_path(self, tmp_path):
        f = tmp_path / "Program.cs"
        f.write_text("// header\nclass Program { }\n", encoding="utf-8")
        unit = SourceUnit.from_path(f)
        assert unit.file_path == str(f)
        assert unit.get_first_token().text == "class"

    def test_from_path_missing_file(self, tmp_path):
        with pytest.raises(SourceReadError) as excinfo:
            SourceUnit.from_path(tmp_path / "missing.cs")
        assert isinstance(excinfo.value, OSError)

    def test_from_path_undecodable_file(self, tmp_path):
        f = tmp_path / "Binary.cs"
        f.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(SourceReadError):
            SourceUnit.from_path(f)


class TestFirstNonWhitespaceTrivia:

    def test_only_whitespace(self):
        trivia = [
            SyntaxTrivia(TriviaKind.WHITESPACE, "  "),
            SyntaxTrivia(TriviaKind.END_OF_LINE, "\n"),
        ]
        assert first_non_whitespace_trivia_index(trivia) == -1

    def test_finds_directive(self):
        trivia = [
            SyntaxTrivia(TriviaKind.END_OF_LINE, "\n"),
            SyntaxTrivia(TriviaKind.DIRECTIVE, "#region"),
        ]
        assert first_non_whitespace_trivia_index(trivia) == 1

    def test_empty(self):
        assert first_non_whitespace_trivia_index(()) == -1


# =============================================================================
# CancellationToken
# =============================================================================

class TestCancellationToken:

    def test_fresh_token_is_not_cancelled(self):
        token = CancellationToken.none()
        assert token.is_cancellation_requested is False
        token.throw_if_cancellation_requested()

    def test_cancel_raises_standard_cancelled_error(self):
        token = CancellationToken()
        token.cancel()
        assert token.is_cancellation_requested
        with pytest.raises(OperationCancelledError) as excinfo:
            token.throw_if_cancellation_requested()
        assert isinstance(excinfo.value, CancelledError)

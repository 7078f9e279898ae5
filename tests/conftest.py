"""
Shared fixtures for the genfilter test suite.
"""

import sys
from pathlib import Path

import pytest

# Ensure the src/ directory is on the import path so that
# genfilter.core.* can be imported without installing the package.
SRC_ROOT = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(SRC_ROOT))


# =============================================================================
# Fixtures — sample C# sources
# =============================================================================

@pytest.fixture
def plain_source() -> str:
    """Hand-written C# file with a license header."""
    return (
        "// Copyright (c) Contoso. All rights reserved.\n"
        "\n"
        "namespace Contoso.App\n"
        "{\n"
        "    public class Program\n"
        "    {\n"
        "    }\n"
        "}\n"
    )


@pytest.fixture
def generated_source() -> str:
    """Tool output with the conventional auto-generated header."""
    return (
        "//------------------------------------------------------------------------------\n"
        "// <auto-generated>\n"
        "//     This code was generated by a tool.\n"
        "// </auto-generated>\n"
        "//------------------------------------------------------------------------------\n"
        "\n"
        "namespace Contoso.App\n"
        "{\n"
        "    internal partial class Resources { }\n"
        "}\n"
    )


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """
    Create a temporary project with generated, hand-written and excluded
    files for scan integration tests.
    """
    src = tmp_path / "src"
    src.mkdir()
    (src / "Program.cs").write_text(
        "using System;\n\nclass Program { }\n", encoding="utf-8",
    )
    (src / "MainForm.Designer.cs").write_text(
        "partial class MainForm { }\n", encoding="utf-8",
    )
    (src / "Resources.cs").write_text(
        "// <auto-generated/>\nclass Resources { }\n", encoding="utf-8",
    )
    (src / "Empty.cs").write_text("   \n\n", encoding="utf-8")
    (src / "notes.txt").write_text("not a source file\n", encoding="utf-8")

    # Excluded build output (should be ignored)
    obj = tmp_path / "obj"
    obj.mkdir()
    (obj / "AssemblyInfo.cs").write_text("class Ignored { }\n", encoding="utf-8")

    return tmp_path


# =============================================================================
# Fixtures — cancellation
# =============================================================================

@pytest.fixture
def countdown_token():
    """
    Factory for tokens that cancel themselves on the *n*-th poll,
    simulating a host abort partway through a classification.
    """
    from genfilter.core.syntax import CancellationToken

    class CountdownToken(CancellationToken):
        __slots__ = ("_remaining",)

        def __init__(self, polls_before_cancel: int):
            super().__init__()
            self._remaining = polls_before_cancel

        def throw_if_cancellation_requested(self) -> None:
            self._remaining -= 1
            if self._remaining <= 0:
                self.cancel()
            super().throw_if_cancellation_requested()

    return CountdownToken

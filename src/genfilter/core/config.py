"""
genfilter Configuration Module

Centralized configuration for generated-code detection and the
directory scan pipeline.  The defaults reproduce the stock heuristics
exactly: ``*.designer.cs`` file names and the ``<auto-generated`` /
``<autogenerated`` header markers.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Tuple

# =============================================================================
# Instance-Based Configuration
# =============================================================================

@dataclass(frozen=True)
class GenfilterConfig:
    """
    Instance-based configuration for genfilter.

    Each ``GenfilterConfig`` is self-contained and can be passed through
    the call stack, so one process can run several analysis sessions
    with different settings.  Instances are frozen: classification is
    a pure function of the unit and the config it was given.

    Create from environment variables::

        config = GenfilterConfig.from_env()

    Or with explicit values::

        config = GenfilterConfig(max_workers=4)
    """

    # ── Heuristics ────────────────────────────────────────────────
    generated_file_patterns: Tuple[str, ...] = (r"\.designer\.cs$",)
    """Regexes matched case-insensitively against the file's base name."""
    header_markers: Tuple[str, ...] = ("<auto-generated", "<autogenerated")
    """Literal, case-sensitive substrings searched for in header comments."""

    # ── File Processing ───────────────────────────────────────────
    target_extensions: frozenset = frozenset((".cs",))
    exclude_dirs: frozenset = frozenset((
        ".git", ".vs", ".idea", "bin", "obj",
        "node_modules", "packages", "TestResults",
    ))
    max_file_size_mb: int = 5
    source_encoding: str = "utf-8-sig"

    # ── Concurrency ───────────────────────────────────────────────
    max_workers: int = 8

    # ── Logging ───────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ── Factory ───────────────────────────────────────────────────

    @classmethod
    def from_env(cls) -> "GenfilterConfig":
        """Build a config snapshot from current environment variables.

        Reads :envvar:`GENFILTER_LOG_LEVEL`, :envvar:`GENFILTER_MAX_WORKERS`
        and :envvar:`GENFILTER_MAX_FILE_SIZE_MB`; everything else keeps
        its default.
        """
        from genfilter.exceptions import ConfigError

        try:
            max_workers = int(os.getenv("GENFILTER_MAX_WORKERS", "8"))
            max_file_size_mb = int(os.getenv("GENFILTER_MAX_FILE_SIZE_MB", "5"))
        except ValueError as exc:
            raise ConfigError(f"Invalid numeric environment setting: {exc}") from exc

        return cls(
            max_workers=max_workers,
            max_file_size_mb=max_file_size_mb,
            log_level=os.getenv("GENFILTER_LOG_LEVEL", "INFO").upper(),
        )

    # ── Validation & Accessors ────────────────────────────────────

    def validate(self) -> bool:
        """
        Validate the configuration.

        Raises :class:`~genfilter.exceptions.ConfigError` on failure.
        """
        from genfilter.exceptions import ConfigError

        if self.max_workers <= 0:
            raise ConfigError(
                f"max_workers must be positive, got {self.max_workers}.\n"
                "  Set via: export GENFILTER_MAX_WORKERS=8"
            )
        if self.max_file_size_mb <= 0:
            raise ConfigError(
                f"max_file_size_mb must be positive, got {self.max_file_size_mb}."
            )
        if not self.header_markers or not all(self.header_markers):
            raise ConfigError("header_markers must contain at least one non-empty marker.")
        for pattern in self.generated_file_patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ConfigError(
                    f"Invalid generated file pattern {pattern!r}: {exc}"
                ) from exc
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(
                f"Unknown log level '{self.log_level}'.\n"
                "  Set via: export GENFILTER_LOG_LEVEL=INFO"
            )
        return True

    def get_max_file_bytes(self) -> int:
        """Return the file size limit in bytes."""
        return self.max_file_size_mb * 1024 * 1024


DEFAULT_CONFIG = GenfilterConfig()

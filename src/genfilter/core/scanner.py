"""
genfilter Directory Scanner

Crawls a source tree and classifies every matching file as generated or
hand-written, sharing one session cache across a pool of worker threads.

- Early directory pruning (``.git/``, ``bin/``, ``obj/`` are never entered)
- Concurrent classification with a ``ThreadPoolExecutor``
- Optional ``tqdm`` progress bar
- Unreadable files are counted as errors and do not stop the scan
- Cooperative cancellation through the session's token
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional

from tqdm import tqdm

from genfilter.core.config import GenfilterConfig
from genfilter.exceptions import OperationCancelledError, SourceReadError

if TYPE_CHECKING:
    from genfilter.session import ClassificationSession

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Typed result returned by :meth:`ScanPipeline.run`."""
    files_scanned: int = 0
    generated: List[str] = field(default_factory=list)
    handwritten: List[str] = field(default_factory=list)
    errors: int = 0
    root_dir: str = ""

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict for tooling pipelines."""
        return asdict(self)


def scan_directory(root_path: Path, config: GenfilterConfig | None = None) -> List[Path]:
    """
    Recursively collect source files under *root_path*.

    Uses :func:`os.walk` with in-place pruning of ``config.exclude_dirs``
    so excluded subtrees are never entered.  Files larger than
    ``config.max_file_size_mb`` are skipped with a warning.
    """
    cfg = config or GenfilterConfig()
    source_files: List[Path] = []
    max_bytes = cfg.get_max_file_bytes()

    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = [d for d in dirnames if d not in cfg.exclude_dirs]

        for fname in filenames:
            _, ext = os.path.splitext(fname)
            if ext.lower() not in cfg.target_extensions:
                continue

            full = os.path.join(dirpath, fname)
            try:
                size = os.path.getsize(full)
            except OSError:
                continue

            if size <= max_bytes:
                source_files.append(Path(full))
            else:
                logger.warning(
                    f"Skipping large file: {full} ({size / (1024 * 1024):.1f}MB)"
                )

    source_files.sort()
    return source_files


class ScanPipeline:
    """
    Classifies a batch of files concurrently within one session.

    The pipeline never creates its own cache: every worker goes through
    the session, so a file already classified earlier in the session is
    answered from the cache.
    """

    def __init__(self, session: "ClassificationSession", show_progress: bool = False):
        self.session = session
        self.config = session.config
        self.show_progress = show_progress

    def run(self, paths: Iterable[Path], root_dir: Optional[Path] = None) -> ScanResult:
        """
        Classify every file in *paths*.

        Raises :class:`~genfilter.exceptions.OperationCancelledError` if the
        session is cancelled mid-scan; files not yet started are dropped.
        A ``KeyboardInterrupt`` also cancels the session token before it
        propagates.
        """
        files = list(paths)
        result = ScanResult(files_scanned=len(files), root_dir=str(root_dir or ""))
        if not files:
            logger.warning("No source files found to classify.")
            return result

        logger.info(f"Classifying {len(files):,} files ({self.config.max_workers} workers)...")

        with tqdm(total=len(files), desc="Classifying files", unit="file",
                  disable=not self.show_progress) as pbar:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = {
                    executor.submit(self._process_file, file_path): file_path
                    for file_path in files
                }
                try:
                    for future in as_completed(futures):
                        file_path = futures[future]
                        try:
                            generated = future.result()
                        except SourceReadError as e:
                            logger.error(f"Error reading {file_path}: {e}")
                            result.errors += 1
                        else:
                            bucket = result.generated if generated else result.handwritten
                            bucket.append(str(file_path))
                        finally:
                            pbar.update(1)
                except (KeyboardInterrupt, OperationCancelledError) as exc:
                    # Workers already running poll the token and stop early.
                    if isinstance(exc, KeyboardInterrupt):
                        self.session.cancellation_token.cancel()
                    for pending in futures:
                        pending.cancel()
                    logger.warning("Scan cancelled; pending files dropped")
                    raise

        result.generated.sort()
        result.handwritten.sort()
        logger.info(
            f"Done: {len(result.generated):,} generated, "
            f"{len(result.handwritten):,} hand-written, {result.errors:,} errors"
        )
        return result

    def _process_file(self, file_path: Path) -> bool:
        """Load and classify a single file."""
        self.session.cancellation_token.throw_if_cancellation_requested()
        unit = self.session.load_unit(file_path)
        return self.session.classify(unit)

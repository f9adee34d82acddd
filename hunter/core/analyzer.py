"""
Analysis Worker — Async orchestrator running the per-file pipeline.

Pipeline per file:
1. Read and decode (unreadable files become FileErrors)
2. Build the Source Model (syntax errors are recorded, never fatal)
3. Run the rule engine (a failing rule is recorded, the others still run)

Any other exception while analyzing a file becomes a FileError for that file
only; the rest of the batch is unaffected.

Files run concurrently in worker threads, bounded by `max_workers`. The
ProjectResult is built by a single reduction once every file is done, so
its content never depends on scheduling.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Mapping, Sequence

from hunter.config import AnalysisConfig
from hunter.core.rule_engine import RuleEngine
from hunter.core.source_model import build_source_model
from hunter.errors import FileUnreadableError
from hunter.models.result_models import AnalysisResult, FileError, FileErrorKind, ProjectResult

logger = logging.getLogger("hunter.analyzer")


class AnalysisWorker:
    """Runs the analysis pipeline over a batch of files."""

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        rule_engine: RuleEngine | None = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.rule_engine = rule_engine or RuleEngine()

    # ── Single file (runs in a worker thread) ──

    def analyze_text(self, path: str, text: str) -> AnalysisResult:
        """Analyze already-decoded file contents."""
        start = time.monotonic()
        model = build_source_model(text, path, self.config)
        if model.parse_errors:
            logger.warning(f"{path}: parsed with errors ({len(model.parse_errors)} regions)")

        issues, failures = self.rule_engine.run(model, self.config)
        elapsed = (time.monotonic() - start) * 1000
        logger.debug(f"{path}: {len(issues)} issues in {elapsed:.1f}ms")

        return AnalysisResult(
            path=path,
            line_count=model.line_count,
            issues=issues,
            parse_errors=list(model.parse_errors),
            rule_failures=failures,
            duration_ms=round(elapsed, 2),
        )

    def read_file(self, path: str) -> str:
        """Read a file as UTF-8, raising FileUnreadableError on any failure."""
        file_path = Path(path)
        try:
            size = file_path.stat().st_size
            if size > self.config.max_file_size_bytes:
                raise FileUnreadableError(
                    path, f"file is {size} bytes, limit is {self.config.max_file_size_bytes}"
                )
            return file_path.read_bytes().decode("utf-8")
        except OSError as e:
            raise FileUnreadableError(path, e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            raise FileUnreadableError(path, f"not valid UTF-8 ({e.reason})") from e

    def analyze_path(self, path: str) -> AnalysisResult | FileError:
        try:
            text = self.read_file(path)
        except FileUnreadableError as e:
            logger.warning(f"Skipping unreadable file {e.path}: {e.reason}")
            return FileError(path=path, kind=FileErrorKind.FILE_UNREADABLE, message=e.reason)
        return self._analyze_isolated(path, text)

    def analyze_source(self, path: str, text: str) -> AnalysisResult | FileError:
        try:
            size = len(text.encode("utf-8"))
        except UnicodeEncodeError as e:
            reason = f"not valid UTF-8 ({e.reason})"
            logger.warning(f"Skipping unreadable file {path}: {reason}")
            return FileError(path=path, kind=FileErrorKind.FILE_UNREADABLE, message=reason)
        if size > self.config.max_file_size_bytes:
            reason = f"file is {size} bytes, limit is {self.config.max_file_size_bytes}"
            logger.warning(f"Skipping oversized file {path}: {reason}")
            return FileError(path=path, kind=FileErrorKind.FILE_UNREADABLE, message=reason)
        return self._analyze_isolated(path, text)

    def _analyze_isolated(self, path: str, text: str) -> AnalysisResult | FileError:
        """Run analyze_text, turning any failure into a FileError for this file only."""
        try:
            return self.analyze_text(path, text)
        except Exception as e:
            logger.exception(f"Analysis failed for {path}")
            return FileError(
                path=path,
                kind=FileErrorKind.ANALYSIS_FAILED,
                message=f"{type(e).__name__}: {e}",
            )

    # ── Batches ──

    async def run(self, paths: Sequence[str]) -> ProjectResult:
        """Analyze files on disk. A path listed more than once is analyzed once."""
        unique = dict.fromkeys(str(path) for path in paths)
        return await self._gather([(self.analyze_path, (path,)) for path in unique])

    async def run_sources(self, sources: Mapping[str, str]) -> ProjectResult:
        """Analyze in-memory file contents keyed by path."""
        return await self._gather(
            [(self.analyze_source, (path, text)) for path, text in sources.items()]
        )

    async def _gather(self, jobs: list) -> ProjectResult:
        start = time.monotonic()
        semaphore = asyncio.Semaphore(self.config.max_workers)

        async def _run_one(fn, args):
            async with semaphore:
                return await asyncio.to_thread(fn, *args)

        outcomes = await asyncio.gather(*(_run_one(fn, args) for fn, args in jobs))

        results = [o for o in outcomes if isinstance(o, AnalysisResult)]
        errors = [o for o in outcomes if isinstance(o, FileError)]
        project = ProjectResult.from_results(results, errors)

        elapsed = (time.monotonic() - start) * 1000
        logger.info(
            f"Analyzed {project.files_analyzed} files ({project.total_lines} lines): "
            f"{project.total_issues} issues, {len(project.errors)} failed "
            f"({elapsed:.1f}ms)"
        )
        return project


def analyze(paths: Sequence[str], config: AnalysisConfig | None = None) -> ProjectResult:
    """Analyze files on disk; blocking entry point."""
    return asyncio.run(AnalysisWorker(config).run(paths))


def analyze_sources(sources: Mapping[str, str], config: AnalysisConfig | None = None) -> ProjectResult:
    """Analyze in-memory contents keyed by path; blocking entry point."""
    return asyncio.run(AnalysisWorker(config).run_sources(sources))

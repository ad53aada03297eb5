"""Analysis entry points.

Single files are parsed and extracted synchronously.  A project run
extracts every discovered file on a thread pool (files share no mutable
state; the registry's grammar cache is lock-guarded), then resolves
relationships once over the complete set of analyses.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from scopegraph.config.models import ScopeGraphConfig
from scopegraph.core.errors import InternalError, LanguageError, ScopeGraphError, SourceFileError
from scopegraph.core.logging import get_logger, set_run_id
from scopegraph.extraction.extractor import ScopeExtractor
from scopegraph.extraction.models import ScopeFileAnalysis
from scopegraph.parsing.registry import ParserRegistry, default_registry
from scopegraph.resolution.models import RelationshipResolutionResult
from scopegraph.resolution.resolver import RelationshipResolver

log = get_logger(__name__)


@dataclass
class ProjectAnalysis:
    """Result of ``analyze_project``."""

    root: Path
    analyses: dict[str, ScopeFileAnalysis]
    resolution: RelationshipResolutionResult
    # Relative path -> error message for files that failed to load
    errors: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)


def analyze_source(
    path: str | Path,
    source: bytes | str,
    registry: ParserRegistry | None = None,
    *,
    language: str | None = None,
    include_module_scopes: bool = True,
) -> ScopeFileAnalysis:
    """Extract scopes from in-memory source.

    Raises:
        LanguageError: Unsupported language or missing grammar.
    """
    extractor = ScopeExtractor(registry or default_registry(), include_module_scopes=include_module_scopes)
    return extractor.extract_source(path, source, language)


def read_source(path: Path) -> bytes:
    """Read a source file.

    Raises:
        SourceFileError: Missing or unreadable file.
    """
    if not path.is_file():
        raise SourceFileError.not_found(str(path))
    try:
        return path.read_bytes()
    except OSError as e:
        raise SourceFileError.unreadable(str(path), str(e)) from e


def analyze_file(
    path: str | Path,
    registry: ParserRegistry | None = None,
    *,
    display_path: str | None = None,
    include_module_scopes: bool = True,
) -> ScopeFileAnalysis:
    """Read and extract one file.  ``display_path`` becomes ``file_path`` in the result.

    Raises:
        SourceFileError: Missing or unreadable file.
        LanguageError: Unsupported language or missing grammar.
    """
    path = Path(path)
    registry = registry or default_registry()
    language = registry.language_for_path(path)
    source = read_source(path)
    return analyze_source(
        display_path or str(path),
        source,
        registry,
        language=language,
        include_module_scopes=include_module_scopes,
    )


def discover_files(
    root: Path,
    registry: ParserRegistry,
    *,
    excluded_dirs: Iterable[str] = (),
    max_file_size_kb: int | None = None,
) -> tuple[list[Path], list[Path]]:
    """Supported source files under ``root``, plus those skipped for size.

    Walks with directory pruning; results are sorted for a stable
    file-processing order.
    """
    excluded = set(excluded_dirs)
    limit = max_file_size_kb * 1024 if max_file_size_kb else None
    files: list[Path] = []
    oversized: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            file_path = Path(dirpath) / filename
            if not registry.is_supported(file_path):
                continue
            if limit is not None:
                with contextlib.suppress(OSError):
                    if file_path.stat().st_size > limit:
                        oversized.append(file_path)
                        continue
            files.append(file_path)
    return files, oversized


def analyze_project(
    root: str | Path,
    paths: Iterable[str | Path] | None = None,
    config: ScopeGraphConfig | None = None,
    registry: ParserRegistry | None = None,
) -> ProjectAnalysis:
    """Extract every supported file under ``root`` and resolve relationships.

    ``paths`` restricts the run to the given files (relative to ``root`` or
    absolute).  Files that cannot be read are reported in ``errors`` and
    left out of resolution.  An unexpected extraction crash is logged and
    reported for that file as an internal error.
    """
    root = Path(root).resolve()
    config = config or ScopeGraphConfig()
    registry = registry or default_registry()
    run_id = set_run_id()

    if paths is None:
        files, oversized = discover_files(
            root,
            registry,
            excluded_dirs=config.extraction.excluded_dirs,
            max_file_size_kb=config.extraction.max_file_size_kb,
        )
    else:
        files = [p if Path(p).is_absolute() else root / p for p in map(Path, paths)]
        oversized = []
    skipped = [_relative(root, p) for p in oversized]
    for rel in skipped:
        log.info("file_skipped", file=rel, reason="size_limit")

    log.info("project_analysis_started", root=str(root), files=len(files), run_id=run_id)
    extractor = ScopeExtractor(registry, include_module_scopes=config.extraction.include_module_scopes)

    def work(file_path: Path) -> tuple[str, ScopeFileAnalysis | ScopeGraphError]:
        rel = _relative(root, file_path)
        try:
            source = read_source(file_path)
            language = registry.language_for_path(file_path)
            return rel, extractor.extract_source(rel, source, language)
        except (SourceFileError, LanguageError) as e:
            return rel, e
        except Exception as e:
            log.exception("extraction_crashed", file=rel)
            return rel, InternalError.unexpected(f"extraction failed for {rel}: {e}", file=rel, exception=type(e).__name__)

    analyses: dict[str, ScopeFileAnalysis] = {}
    errors: dict[str, str] = {}
    with ThreadPoolExecutor(max_workers=config.extraction.max_workers, thread_name_prefix="scopegraph") as pool:
        # map preserves submission order, keeping file-processing order stable
        for rel, outcome in pool.map(work, files):
            if isinstance(outcome, ScopeGraphError):
                log.warning("file_failed", file=rel, error=outcome.error_name, message=outcome.message)
                errors[rel] = outcome.message
            else:
                analyses[rel] = outcome

    resolution = RelationshipResolver(config.resolution).resolve(root, analyses)
    log.info(
        "project_analysis_finished",
        files=len(analyses),
        failed=len(errors),
        relationships=resolution.stats.total_relationships,
    )
    return ProjectAnalysis(root=root, analyses=analyses, resolution=resolution, errors=errors, skipped=skipped)


def _relative(root: Path, path: Path) -> str:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from .ast_parse import parse_source, read_text
from .errors import ParseError, ReadError
from .extract import Extraction, extract
from .fs_scan import scan_repository, to_rel_path
from .model import AnalysisReport, FileInfo, FileWarning, PatternFinding

logger = logging.getLogger(__name__)


class FileOutcome(BaseModel):
	"""Result of processing one file; exactly one of the payloads is set."""

	file: FileInfo
	extraction: Optional[Extraction] = None
	text: Optional[str] = None
	warning: Optional[FileWarning] = None


def _warning(error: Union[ParseError, ReadError], rel_path: str) -> FileWarning:
	return FileWarning(kind=error.kind, path=rel_path, message=error.message)


def process_file(f: FileInfo) -> FileOutcome:
	"""Read one file and, for source files, parse and extract it.

	Parse and read failures are returned as a warning so a bad file never
	aborts the rest of the walk.
	"""
	try:
		text = read_text(f.path, f.rel_path)
		if f.kind == "documentation":
			return FileOutcome(file=f, text=text)
		tree = parse_source(text, f.rel_path, f.language or "")
		return FileOutcome(file=f, extraction=extract(tree))
	except (ParseError, ReadError) as e:
		logger.warning("Skipping %s: %s", f.rel_path, e.message)
		return FileOutcome(file=f, warning=_warning(e, f.rel_path))


def _listing_warning(root: str, error: OSError) -> FileWarning:
	rel_path = to_rel_path(os.path.abspath(root), error.filename or root)
	message = f"cannot list directory: {error.strerror or error}"
	logger.warning("Skipping %s: %s", rel_path, message)
	return FileWarning(kind="read_error", path=rel_path, message=message)


def _cancelled(cancel: Optional[threading.Event]) -> bool:
	return cancel is not None and cancel.is_set()


def _process_unless_cancelled(f: FileInfo, cancel: Optional[threading.Event]) -> Optional[FileOutcome]:
	if _cancelled(cancel):
		return None
	return process_file(f)


def aggregate(
	root: str,
	*,
	ignore_dirs: Iterable[str] = (),
	workers: int = 1,
	cancel: Optional[threading.Event] = None,
) -> AnalysisReport:
	"""Analyze every JavaScript/TypeScript and documentation file under root.

	Files are processed in scan order. With workers > 1 the per-file work runs
	on a thread pool and outcomes are merged here in scan order, so the report
	is the same as a sequential run. Setting cancel abandons the files not yet
	read and returns a report marked partial.

	Raises NotFoundError if root is not a directory.
	"""
	scan_errors: List[OSError] = []
	files = [f for f in scan_repository(root, ignore_dirs, errors=scan_errors) if f.kind != "ignored"]
	logger.info("Analyzing %d files under %s", len(files), root)

	dependencies: Dict[str, List[str]] = {}
	patterns: List[PatternFinding] = []
	documentation: Dict[str, str] = {}
	warnings: List[FileWarning] = [_listing_warning(root, e) for e in scan_errors]
	partial = False

	if workers > 1:
		with ThreadPoolExecutor(max_workers=workers) as executor:
			outcomes = list(executor.map(lambda f: _process_unless_cancelled(f, cancel), files))
	else:
		outcomes = []
		for f in files:
			if _cancelled(cancel):
				break
			outcomes.append(process_file(f))
	if len(outcomes) < len(files) or any(o is None for o in outcomes):
		partial = True
		logger.info("Analysis of %s cancelled; returning partial report", root)

	for outcome in outcomes:
		if outcome is None:
			continue
		rel_path = outcome.file.rel_path
		if outcome.warning is not None:
			warnings.append(outcome.warning)
		elif outcome.extraction is not None:
			dependencies[rel_path] = outcome.extraction.imports
			patterns.extend(outcome.extraction.patterns)
		elif outcome.text is not None:
			documentation[rel_path] = outcome.text

	return AnalysisReport(
		structure={},
		dependencies=dependencies,
		patterns=patterns,
		documentation=documentation,
		warnings=warnings,
		partial=partial,
	)


def report_json(report: AnalysisReport, indent: Optional[int] = 2) -> str:
	return report.model_dump_json(indent=indent)

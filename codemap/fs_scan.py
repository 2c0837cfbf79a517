from __future__ import annotations

import os
from typing import Dict, Iterable, List, Optional

from .errors import NotFoundError, ReadError
from .model import FileInfo


SOURCE_LANGUAGE: Dict[str, str] = {
	".js": "javascript",
	".ts": "typescript",
}

DOCUMENTATION_SUFFIXES = (".md", ".txt")


def classify(filename: str) -> str:
	if filename.endswith(tuple(SOURCE_LANGUAGE)):
		return "source"
	if filename.endswith(DOCUMENTATION_SUFFIXES):
		return "documentation"
	return "ignored"


def detect_language(filename: str) -> Optional[str]:
	for suffix, language in SOURCE_LANGUAGE.items():
		if filename.endswith(suffix):
			return language
	return None


def to_rel_path(root: str, file_path: str) -> str:
	return os.path.relpath(file_path, root).replace(os.sep, "/")


def scan_repository(
	root: str,
	ignore_dirs: Iterable[str] = (),
	errors: Optional[List[OSError]] = None,
) -> List[FileInfo]:
	"""List every file under root, sorted by relative path.

	Directories named in ignore_dirs are pruned at any depth. A subdirectory
	that cannot be listed is appended to errors when a list is given, and
	raised as ReadError otherwise. Raises NotFoundError when root is missing or is not
	a directory.
	"""
	root = os.path.abspath(root)
	if not os.path.isdir(root):
		raise NotFoundError("root directory does not exist", path=root)

	skip = set(ignore_dirs)
	files: List[FileInfo] = []

	def _on_error(error: OSError) -> None:
		if errors is None:
			raise ReadError(error.strerror or str(error), path=error.filename) from error
		errors.append(error)

	for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
		dirnames[:] = sorted(d for d in dirnames if d not in skip)
		for filename in filenames:
			path = os.path.join(dirpath, filename)
			if not os.path.isfile(path):
				continue
			files.append(
				FileInfo(
					path=path,
					rel_path=to_rel_path(root, path),
					kind=classify(filename),
					language=detect_language(filename),
				)
			)
	files.sort(key=lambda f: f.rel_path)
	return files

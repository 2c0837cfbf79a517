from __future__ import annotations

import logging
import os
import shutil
import subprocess  # nosec B404
import tempfile
from typing import Optional

from .config import Settings, load_settings
from .errors import CollaboratorError

logger = logging.getLogger(__name__)


def clone_repository(url: str, branch: str, timeout: int) -> str:
	"""Shallow-clone url at branch into a new temporary directory."""
	dest = tempfile.mkdtemp(prefix="codemap-")
	try:
		result = subprocess.run(  # nosec B603 B607
			["git", "clone", "--depth", "1", "--branch", branch, "--", url, dest],
			capture_output=True,
			text=True,
			check=False,
			timeout=timeout,
		)
	except subprocess.TimeoutExpired as e:
		shutil.rmtree(dest, ignore_errors=True)
		raise CollaboratorError(f"git clone timed out after {timeout}s", path=url) from e
	except (FileNotFoundError, OSError) as e:
		shutil.rmtree(dest, ignore_errors=True)
		raise CollaboratorError(f"git is not available: {e}", path=url) from e

	if result.returncode != 0:
		shutil.rmtree(dest, ignore_errors=True)
		stderr = (result.stderr or "").strip() or f"exit status {result.returncode}"
		raise CollaboratorError(f"git clone failed: {stderr}", path=url)
	logger.info("Cloned %s@%s into %s", url, branch, dest)
	return dest


def fetch_repository(location: str, branch: Optional[str] = None, settings: Optional[Settings] = None) -> str:
	"""Return a readable local directory for location.

	Existing local directories are used in place; anything else is cloned.
	"""
	settings = settings or load_settings()
	if os.path.isdir(location):
		return os.path.abspath(location)
	return clone_repository(location, branch or settings.default_branch, settings.git_timeout)


def release_repository(location: str, path: str) -> None:
	"""Remove path if fetch_repository cloned it for location."""
	if os.path.isdir(location) and os.path.abspath(location) == os.path.abspath(path):
		return
	if os.path.basename(path).startswith("codemap-"):
		shutil.rmtree(path, ignore_errors=True)
		logger.debug("Removed clone %s", path)

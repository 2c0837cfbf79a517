import os
import subprocess

import pytest

from codemap import fetch
from codemap.config import Settings
from codemap.errors import CollaboratorError


SETTINGS = Settings(default_branch="main", git_timeout=5)


def test_local_directory_is_used_in_place(tmp_path):
	assert fetch.fetch_repository(str(tmp_path), settings=SETTINGS) == os.path.abspath(str(tmp_path))


def test_clone_uses_default_branch_and_temp_dir(monkeypatch):
	calls = []

	def fake_run(cmd, **kwargs):
		calls.append((cmd, kwargs))
		return subprocess.CompletedProcess(cmd, 0, "", "")

	monkeypatch.setattr(fetch.subprocess, "run", fake_run)
	path = fetch.fetch_repository("https://example.com/org/repo.git", settings=SETTINGS)
	try:
		cmd, kwargs = calls[0]
		assert cmd[:2] == ["git", "clone"]
		assert cmd[cmd.index("--branch") + 1] == "main"
		assert cmd[-2:] == ["https://example.com/org/repo.git", path]
		assert kwargs["timeout"] == 5
		assert os.path.basename(path).startswith("codemap-")
		assert os.path.isdir(path)
	finally:
		fetch.release_repository("https://example.com/org/repo.git", path)
	assert not os.path.exists(path)


def test_clone_with_explicit_branch(monkeypatch):
	calls = []

	def fake_run(cmd, **kwargs):
		calls.append(cmd)
		return subprocess.CompletedProcess(cmd, 0, "", "")

	monkeypatch.setattr(fetch.subprocess, "run", fake_run)
	path = fetch.fetch_repository("git@example.com:org/repo.git", "develop", settings=SETTINGS)
	fetch.release_repository("git@example.com:org/repo.git", path)
	assert calls[0][calls[0].index("--branch") + 1] == "develop"


def test_clone_failure_raises_and_cleans_up(monkeypatch):
	dests = []

	def fake_run(cmd, **kwargs):
		dests.append(cmd[-1])
		return subprocess.CompletedProcess(cmd, 128, "", "fatal: repository not found\n")

	monkeypatch.setattr(fetch.subprocess, "run", fake_run)
	with pytest.raises(CollaboratorError) as exc:
		fetch.fetch_repository("https://example.com/missing.git", settings=SETTINGS)
	assert "repository not found" in exc.value.message
	assert exc.value.path == "https://example.com/missing.git"
	assert not os.path.exists(dests[0])


def test_clone_timeout_raises(monkeypatch):
	def fake_run(cmd, **kwargs):
		raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

	monkeypatch.setattr(fetch.subprocess, "run", fake_run)
	with pytest.raises(CollaboratorError) as exc:
		fetch.fetch_repository("https://example.com/slow.git", settings=SETTINGS)
	assert "timed out" in exc.value.message


def test_missing_git_raises(monkeypatch):
	def fake_run(cmd, **kwargs):
		raise FileNotFoundError("git")

	monkeypatch.setattr(fetch.subprocess, "run", fake_run)
	with pytest.raises(CollaboratorError):
		fetch.fetch_repository("https://example.com/repo.git", settings=SETTINGS)


def test_release_keeps_local_directories(tmp_path):
	fetch.release_repository(str(tmp_path), str(tmp_path))
	assert tmp_path.is_dir()

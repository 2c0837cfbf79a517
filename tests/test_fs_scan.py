import os

import pytest

from codemap.errors import NotFoundError, ReadError
from codemap.fs_scan import classify, detect_language, scan_repository


def _touch(root, rel, text=""):
	p = root / rel
	p.parent.mkdir(parents=True, exist_ok=True)
	p.write_text(text)
	return p


def test_classify_by_suffix():
	assert classify("a.js") == "source"
	assert classify("a.ts") == "source"
	assert classify("types.d.ts") == "source"
	assert classify("README.md") == "documentation"
	assert classify("notes.txt") == "documentation"
	assert classify("App.jsx") == "ignored"
	assert classify("LOUD.JS") == "ignored"
	assert classify("Makefile") == "ignored"


def test_detect_language():
	assert detect_language("a.js") == "javascript"
	assert detect_language("a.ts") == "typescript"
	assert detect_language("a.md") is None


def test_scan_is_recursive_sorted_and_relative(tmp_path):
	_touch(tmp_path, "z.ts")
	_touch(tmp_path, "b/inner.js")
	_touch(tmp_path, "a/deep/doc.md")
	_touch(tmp_path, "logo.png")
	(tmp_path / "empty_dir").mkdir()

	files = scan_repository(str(tmp_path))
	assert [f.rel_path for f in files] == ["a/deep/doc.md", "b/inner.js", "logo.png", "z.ts"]
	assert [f.kind for f in files] == ["documentation", "source", "ignored", "source"]
	assert files[1].language == "javascript"
	assert files[1].path == str(tmp_path / "b" / "inner.js")


def test_scan_prunes_ignored_dirs(tmp_path):
	_touch(tmp_path, "src/main.ts")
	_touch(tmp_path, "node_modules/dep/index.js")
	_touch(tmp_path, "src/node_modules/other.js")

	files = scan_repository(str(tmp_path), ignore_dirs=["node_modules"])
	assert [f.rel_path for f in files] == ["src/main.ts"]


def test_scan_missing_root_raises(tmp_path):
	with pytest.raises(NotFoundError) as exc:
		scan_repository(str(tmp_path / "nope"))
	assert exc.value.kind == "not_found"
	assert exc.value.path.endswith("nope")


def test_scan_root_that_is_a_file_raises(tmp_path):
	f = _touch(tmp_path, "a.ts")
	with pytest.raises(NotFoundError):
		scan_repository(str(f))


def test_unlistable_directory_is_collected(tmp_path, monkeypatch):
	_touch(tmp_path, "ok.ts")
	_touch(tmp_path, "secret/hidden.ts")
	real_scandir = os.scandir

	def scandir(path="."):
		if os.path.basename(os.fspath(path)) == "secret":
			raise PermissionError(13, "Permission denied", os.fspath(path))
		return real_scandir(path)

	monkeypatch.setattr(os, "scandir", scandir)
	errors = []
	files = scan_repository(str(tmp_path), errors=errors)
	assert [f.rel_path for f in files] == ["ok.ts"]
	assert [os.path.basename(e.filename) for e in errors] == ["secret"]

	with pytest.raises(ReadError):
		scan_repository(str(tmp_path))

from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from .errors import ParseError, ReadError

logger = logging.getLogger(__name__)


LANGUAGES: Dict[str, Language] = {
	"javascript": Language(tsjavascript.language()),
	"typescript": Language(tstypescript.language_typescript()),
}


def read_text(path: str, rel_path: Optional[str] = None) -> str:
	try:
		with open(path, "r", encoding="utf-8", newline="") as fh:
			return fh.read()
	except UnicodeDecodeError as e:
		raise ReadError(f"not valid UTF-8: {e.reason} at byte {e.start}", path=rel_path or path) from e
	except OSError as e:
		raise ReadError(e.strerror or str(e), path=rel_path or path) from e


def iter_nodes(root: Node) -> Iterator[Node]:
	"""Yield root and its descendants in pre-order (source order)."""
	stack = [root]
	while stack:
		node = stack.pop()
		yield node
		stack.extend(reversed(node.children))


def _first_error(root: Node) -> Optional[Node]:
	for node in iter_nodes(root):
		if node.type == "ERROR" or node.is_missing:
			return node
	return None


def _describe_error(node: Optional[Node]) -> str:
	if node is None:
		return "syntax error"
	row, column = node.start_point
	where = f"line {row + 1}, column {column + 1}"
	if node.is_missing:
		return f"missing {node.type!r} at {where}"
	return f"unexpected input at {where}"


def parse_source(text: str, path: str, language: str) -> Tree:
	"""Parse one JavaScript or TypeScript module.

	A new Parser is built on every call so trees are never shared between
	threads. tree-sitter always yields a tree, so any error or missing node
	in it is raised as ParseError.
	"""
	if language not in LANGUAGES:
		raise ParseError(f"no grammar for language {language!r}", path=path)
	parser = Parser(LANGUAGES[language])
	tree = parser.parse(text.encode("utf-8"))
	if tree.root_node.has_error:
		raise ParseError(_describe_error(_first_error(tree.root_node)), path=path)
	logger.debug("Parsed %s (%s)", path, language)
	return tree

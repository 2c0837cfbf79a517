from __future__ import annotations

import enum
from typing import List, Optional, Tuple

from pydantic import BaseModel
from tree_sitter import Node, Tree

from .model import PatternFinding


CLASS_DECLARATION_TYPES = ("class_declaration", "abstract_class_declaration")
ACCESSOR_KEYWORDS = ("get", "set", "static get")
QUOTES = ("'", '"', "`")


class NodeKind(enum.Enum):
	IMPORT_DECL = "import_decl"
	CLASS_DECL = "class_decl"
	OTHER = "other"


class Extraction(BaseModel):
	imports: List[str] = []
	patterns: List[PatternFinding] = []


def node_kind(node: Node, parent: Optional[Node] = None) -> NodeKind:
	if node.type == "import_statement" and parent is not None and parent.type == "program":
		return NodeKind.IMPORT_DECL
	if not node.is_named:
		return NodeKind.OTHER
	if node.type in CLASS_DECLARATION_TYPES:
		return NodeKind.CLASS_DECL
	# `export default class {}` parses as a class expression under the export
	if node.type == "class" and parent is not None and parent.type == "export_statement":
		return NodeKind.CLASS_DECL
	return NodeKind.OTHER


def _text(node: Node) -> str:
	return node.text.decode("utf-8")


def _unquote(text: str) -> str:
	if len(text) >= 2 and text[0] in QUOTES and text[-1] == text[0]:
		return text[1:-1]
	return text


def _import_source(node: Node) -> Optional[str]:
	source = node.child_by_field_name("source")
	if source is None:
		# import x = require("y") keeps its string inside import_require_clause
		return None
	return _unquote(_text(source))


def _is_accessor(member: Node) -> bool:
	return any(not c.is_named and c.type in ACCESSOR_KEYWORDS for c in member.children)


def _method_name(member: Node) -> Optional[str]:
	name = member.child_by_field_name("name")
	if name is None:
		return None
	if name.type == "string":
		return _unquote(_text(name))
	return _text(name)


def _class_finding(node: Node) -> PatternFinding:
	name_node = node.child_by_field_name("name")
	methods: List[str] = []
	body = node.child_by_field_name("body")
	if body is not None:
		for member in body.named_children:
			if member.type != "method_definition" or _is_accessor(member):
				continue
			method = _method_name(member)
			if method is not None:
				methods.append(method)
	return PatternFinding(
		name=_text(name_node) if name_node is not None else None,
		methods=methods,
	)


def extract(tree: Tree) -> Extraction:
	"""Collect import specifiers and class declarations from one syntax tree.

	Nodes are visited in pre-order, so classes nested inside other classes or
	functions are reported as separate entries after their enclosing class.
	"""
	imports: List[str] = []
	patterns: List[PatternFinding] = []
	stack: List[Tuple[Node, Optional[Node]]] = [(tree.root_node, None)]
	while stack:
		node, parent = stack.pop()
		stack.extend((child, node) for child in reversed(node.children))
		kind = node_kind(node, parent)
		if kind is NodeKind.IMPORT_DECL:
			source = _import_source(node)
			if source is not None:
				imports.append(source)
		elif kind is NodeKind.CLASS_DECL:
			patterns.append(_class_finding(node))
		elif kind is NodeKind.OTHER:
			continue
		else:
			raise AssertionError(f"unhandled node kind {kind!r}")
	return Extraction(imports=imports, patterns=patterns)

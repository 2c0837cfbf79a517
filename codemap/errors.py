from __future__ import annotations

from typing import Dict, Optional


class AnalyzerError(Exception):
	"""Base error carrying a machine-readable kind and the offending path."""

	kind = "analyzer_error"

	def __init__(self, message: str, path: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.path = path

	def __str__(self) -> str:
		if self.path:
			return f"{self.path}: {self.message}"
		return self.message

	def to_dict(self) -> Dict[str, Optional[str]]:
		return {"kind": self.kind, "message": self.message, "path": self.path}


class NotFoundError(AnalyzerError):
	kind = "not_found"


class ParseError(AnalyzerError):
	kind = "parse_error"


class ReadError(AnalyzerError):
	kind = "read_error"


class CollaboratorError(AnalyzerError):
	kind = "collaborator_error"

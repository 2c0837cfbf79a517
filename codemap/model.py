from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileInfo(BaseModel):
	path: str
	rel_path: str
	kind: Literal["source", "documentation", "ignored"]
	language: Optional[str] = None


class PatternFinding(BaseModel):
	model_config = ConfigDict(frozen=True)

	type: Literal["class"] = "class"
	name: Optional[str] = None
	methods: List[str] = []


class FileWarning(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["parse_error", "read_error"]
	path: str
	message: str


class AnalysisReport(BaseModel):
	"""Report for one analyzed tree.

	Fields cannot be reassigned once built. The nested dicts and lists are
	ordinary containers; the aggregator hands out a fresh report per call and
	never touches it again.
	"""

	model_config = ConfigDict(frozen=True)

	structure: Dict[str, Any] = {}
	dependencies: Dict[str, List[str]] = {}
	patterns: List[PatternFinding] = []
	documentation: Dict[str, str] = {}
	warnings: List[FileWarning] = []
	partial: bool = False


class ReportRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	root_path: str = Field(alias="rootPath")


class MergeRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	source_location: str = Field(alias="sourceLocation")
	target_location: str = Field(alias="targetLocation")
	source_branch: Optional[str] = Field(default=None, alias="sourceBranch")
	target_branch: Optional[str] = Field(default=None, alias="targetBranch")


class MergeResult(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	source_analysis: AnalysisReport = Field(alias="sourceAnalysis")
	target_analysis: AnalysisReport = Field(alias="targetAnalysis")
	merge_strategy: str = Field(alias="mergeStrategy")


class ErrorDetail(BaseModel):
	kind: str
	message: str
	path: Optional[str] = None

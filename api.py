from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from codemap.aggregate import aggregate
from codemap.config import Settings, load_settings
from codemap.errors import AnalyzerError
from codemap.fetch import fetch_repository, release_repository
from codemap.model import (
	AnalysisReport,
	MergeRequest,
	MergeResult,
	ReportRequest,
)
from codemap.strategy import generate_merge_strategy

logger = logging.getLogger(__name__)


app = FastAPI(title="codemap")

ERROR_STATUS = {
	"not_found": 404,
	"collaborator_error": 502,
}


@app.exception_handler(AnalyzerError)
async def analyzer_error_handler(request: Request, exc: AnalyzerError) -> JSONResponse:
	logger.error("%s failed: %s", request.url.path, exc)
	return JSONResponse(status_code=ERROR_STATUS.get(exc.kind, 400), content={"error": exc.to_dict()})


def get_settings() -> Settings:
	return load_settings()


def get_fetcher() -> Callable[..., str]:
	return fetch_repository


def get_generator() -> Callable[..., str]:
	return generate_merge_strategy


def _analyze_location(
	location: str,
	branch: Optional[str],
	settings: Settings,
	fetch: Callable[..., str],
) -> AnalysisReport:
	path = fetch(location, branch, settings=settings)
	try:
		return aggregate(path, ignore_dirs=settings.ignore_dirs, workers=settings.workers)
	finally:
		release_repository(location, path)


@app.post("/analyze", response_model=MergeResult)
def analyze(
	req: MergeRequest,
	settings: Settings = Depends(get_settings),
	fetch: Callable[..., str] = Depends(get_fetcher),
	generate: Callable[..., str] = Depends(get_generator),
) -> MergeResult:
	source_analysis = _analyze_location(req.source_location, req.source_branch, settings, fetch)
	target_analysis = _analyze_location(req.target_location, req.target_branch, settings, fetch)

	merge_strategy = generate(source_analysis, target_analysis, settings=settings)
	return MergeResult(
		source_analysis=source_analysis,
		target_analysis=target_analysis,
		merge_strategy=merge_strategy,
	)


@app.post("/report", response_model=AnalysisReport)
def report(req: ReportRequest, settings: Settings = Depends(get_settings)) -> AnalysisReport:
	return aggregate(req.root_path, ignore_dirs=settings.ignore_dirs, workers=settings.workers)


@app.get("/health")
def health() -> dict:
	return {"status": "healthy"}
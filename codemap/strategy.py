from __future__ import annotations

import logging
import time
from typing import Any, Optional

from anthropic import (
	Anthropic,
	APIConnectionError,
	APIError,
	APIStatusError,
	RateLimitError,
)

from .config import Settings, load_settings
from .errors import CollaboratorError
from .model import AnalysisReport

logger = logging.getLogger(__name__)


PLAN_SECTIONS = (
	"1. Identifies compatible and conflicting patterns",
	"2. Suggests refactoring steps",
	"3. Provides a step-by-step integration plan",
	"4. Highlights potential risks and mitigations",
)


def build_prompt(source: AnalysisReport, target: AnalysisReport) -> str:
	sections = "\n".join(PLAN_SECTIONS)
	return (
		"Given the following source code analysis:\n"
		f"{source.model_dump_json(indent=2)}\n\n"
		"And target codebase analysis:\n"
		f"{target.model_dump_json(indent=2)}\n\n"
		"Generate a detailed merge strategy that:\n"
		f"{sections}"
	)


def _response_text(response: Any) -> str:
	parts = []
	for block in getattr(response, "content", None) or []:
		if getattr(block, "type", None) == "text":
			parts.append(block.text)
	return "\n".join(parts)


def generate_merge_strategy(
	source: AnalysisReport,
	target: AnalysisReport,
	client: Optional[Any] = None,
	settings: Optional[Settings] = None,
) -> str:
	"""Ask the model for a plan to merge the source tree into the target.

	Rate limits, connection failures and 5xx server errors are retried with
	exponential backoff; every other failure, and running out of retries,
	raises CollaboratorError.
	"""
	settings = settings or load_settings()
	if client is None:
		if not settings.anthropic_api_key:
			raise CollaboratorError("ANTHROPIC_API_KEY is not set")
		client = Anthropic(api_key=settings.anthropic_api_key)

	prompt = build_prompt(source, target)
	retries = max(1, settings.llm_max_retries)
	for attempt in range(retries):
		try:
			response = client.messages.create(
				model=settings.model,
				max_tokens=settings.max_tokens,
				messages=[{"role": "user", "content": prompt}],
			)
		except (RateLimitError, APIConnectionError, APIStatusError) as e:
			# 503 and 529 (overloaded) arrive as their own APIStatusError subclasses
			retryable = isinstance(e, (RateLimitError, APIConnectionError)) or e.status_code >= 500
			if retryable and attempt < retries - 1:
				wait_time = 2**attempt
				logger.warning("Merge strategy request failed (%s). Retry %d/%d in %ds", e, attempt + 1, retries, wait_time)
				time.sleep(wait_time)
				continue
			raise CollaboratorError(f"merge strategy generation failed: {e}") from e
		except APIError as e:
			raise CollaboratorError(f"merge strategy generation failed: {e}") from e

		text = _response_text(response)
		logger.info("Generated merge strategy (%d chars) with %s", len(text), settings.model)
		return text

	raise CollaboratorError("merge strategy generation failed")

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-opus-20240229"
DEFAULT_IGNORE_DIRS = ".git,node_modules"


def _env_int(name: str, default: int) -> int:
	raw = os.getenv(name, "").strip()
	if not raw:
		return default
	try:
		return int(raw)
	except ValueError:
		logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
		return default


def _env_list(name: str, default: str) -> Tuple[str, ...]:
	raw = os.getenv(name)
	if raw is None:
		raw = default
	return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
	host: str = "127.0.0.1"
	port: int = 3000
	anthropic_api_key: Optional[str] = None
	model: str = DEFAULT_MODEL
	max_tokens: int = 4096
	llm_max_retries: int = 3
	default_branch: str = "main"
	git_timeout: int = 300
	workers: int = 1
	ignore_dirs: Tuple[str, ...] = (".git", "node_modules")
	log_level: str = "INFO"

	@classmethod
	def from_env(cls) -> "Settings":
		return cls(
			host=os.getenv("HOST", "") or "127.0.0.1",
			port=_env_int("PORT", 3000),
			anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
			model=os.getenv("CODEMAP_MODEL", "") or DEFAULT_MODEL,
			max_tokens=_env_int("CODEMAP_MAX_TOKENS", 4096),
			llm_max_retries=max(1, _env_int("CODEMAP_LLM_MAX_RETRIES", 3)),
			default_branch=os.getenv("CODEMAP_DEFAULT_BRANCH", "") or "main",
			git_timeout=_env_int("CODEMAP_GIT_TIMEOUT", 300),
			workers=max(1, _env_int("CODEMAP_WORKERS", 1)),
			ignore_dirs=_env_list("CODEMAP_IGNORE_DIRS", DEFAULT_IGNORE_DIRS),
			log_level=(os.getenv("CODEMAP_LOG_LEVEL", "") or "INFO").upper(),
		)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
	return Settings.from_env()

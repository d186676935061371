from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.3"
)


def load_dotenv_if_needed(path: str = ".env") -> None:
    # Tests must never pick up real credentials from a local .env
    if os.getenv("PYTEST_CURRENT_TEST"):
        return
    env_path = Path(path)
    if not env_path.exists():
        return
    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return
    for line in lines:
        s = line.strip()
        if not s or s.startswith("#") or "=" not in s:
            continue
        key, val = s.split("=", 1)
        key = key.strip()
        val = val.strip()
        if len(val) >= 2 and val[0] == val[-1] and val[0] in {'"', "'"}:
            val = val[1:-1]
        # Real environment wins over .env
        if key and key not in os.environ:
            os.environ[key] = val


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or default).strip()


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _positive(value: Optional[int], default: Optional[int]) -> Optional[int]:
    if value is None or value <= 0:
        return default
    return value


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Process-wide configuration, built once at startup and handed to each component."""

    openai_api_key: str = ""
    openai_model: str = "gpt-4.1"
    openai_endpoint: str = "https://api.openai.com/v1/chat/completions"
    # None means generative calls block until the service answers
    llm_timeout_secs: Optional[int] = None
    temperature: Optional[float] = None

    fetch_timeout_secs: int = 10
    fetch_user_agent: str = DEFAULT_USER_AGENT

    github_token: str = ""
    github_repo: str = "sodapork/interactive-tools"
    github_branch: str = "gh-pages"
    github_api_url: str = "https://api.github.com"
    pages_base_url: str = "https://sodapork.github.io/interactive-tools"

    memberstack_secret_key: str = ""
    memberstack_api_url: str = "https://api.memberstack.io/v1/members/me"

    allow_origins: List[str] = field(
        default_factory=lambda: ["https://interactive-content-frontend.vercel.app", "http://localhost:3000"]
    )
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv_if_needed()
        defaults = cls()
        origins_raw = os.getenv("ALLOW_ORIGINS", "")
        origins = [o.strip() for o in origins_raw.split(",") if o.strip()]
        return cls(
            openai_api_key=_env_str("OPENAI_API_KEY"),
            openai_model=_env_str("OPENAI_MODEL", defaults.openai_model),
            openai_endpoint=_env_str("OPENAI_ENDPOINT", defaults.openai_endpoint),
            llm_timeout_secs=_positive(_env_int("LLM_TIMEOUT_SECS", None), None),
            temperature=_env_float("TEMPERATURE", None),
            fetch_timeout_secs=_positive(_env_int("FETCH_TIMEOUT_SECS", None), defaults.fetch_timeout_secs),
            fetch_user_agent=_env_str("FETCH_USER_AGENT", DEFAULT_USER_AGENT),
            github_token=_env_str("GITHUB_TOKEN"),
            github_repo=_env_str("GITHUB_REPO", defaults.github_repo),
            github_branch=_env_str("GITHUB_BRANCH", defaults.github_branch),
            github_api_url=_env_str("GITHUB_API_URL", defaults.github_api_url).rstrip("/"),
            pages_base_url=_env_str("PAGES_BASE_URL", defaults.pages_base_url).rstrip("/"),
            memberstack_secret_key=_env_str("MEMBERSTACK_SECRET_KEY"),
            memberstack_api_url=_env_str("MEMBERSTACK_API_URL", defaults.memberstack_api_url),
            allow_origins=origins or defaults.allow_origins,
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )

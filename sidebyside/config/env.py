from __future__ import annotations
import os
from dataclasses import dataclass


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return float(raw)


@dataclass(frozen=True)
class WikipediaConfig:
    api_url: str = "https://en.wikipedia.org/w/api.php"
    search_limit: int = 3
    thumb_size: int = 500
    user_agent: str = "SideBySide/0.1 (contact@example.com)"
    http_timeout: float = 10.0


def get_wikipedia_config() -> WikipediaConfig:
    return WikipediaConfig(
        api_url=os.getenv("WIKIPEDIA_API_URL", WikipediaConfig.api_url),
        search_limit=int(os.getenv("WIKIPEDIA_SEARCH_LIMIT", str(WikipediaConfig.search_limit))),
        thumb_size=int(os.getenv("WIKIPEDIA_THUMB_SIZE", str(WikipediaConfig.thumb_size))),
        user_agent=os.getenv("WIKIPEDIA_USER_AGENT", WikipediaConfig.user_agent),
        http_timeout=_float_env("WIKIPEDIA_HTTP_TIMEOUT", WikipediaConfig.http_timeout),
    )


QUOTE_MODES = ("boundary", "positional")


@dataclass(frozen=True)
class ResolverConfig:
    lookup_timeout: float | None = 15.0  # None disables the per-lookup timeout
    quote_mode: str = "boundary"

    @property
    def positional_quotes(self) -> bool:
        return self.quote_mode == "positional"


def get_resolver_config() -> ResolverConfig:
    timeout = _float_env("LOOKUP_TIMEOUT", 15.0)
    mode = os.getenv("QUOTE_MODE", "boundary").strip().lower()
    if mode not in QUOTE_MODES:
        raise ValueError(f"QUOTE_MODE must be one of {QUOTE_MODES}, got {mode!r}")
    return ResolverConfig(lookup_timeout=timeout if timeout > 0 else None, quote_mode=mode)

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging

import httpx

from sidebyside.config.env import WikipediaConfig, get_wikipedia_config

"""
Wikipedia (MediaWiki action API, no key required).

Two calls per candidate:
- opensearch: dirty user text ("lamelo_ball", "drake") -> ranked page titles
- pageimages: exact page title -> thumbnail URL, if the page has one

The first ranked title that has an image wins. Tests are offline (httpx.MockTransport).
"""

logger = logging.getLogger(__name__)


def build_opensearch_params(query: str, cfg: Optional[WikipediaConfig] = None) -> Dict[str, str]:
    cfg = cfg or get_wikipedia_config()
    return {
        "origin": "*",
        "action": "opensearch",
        "search": query,
        "limit": str(cfg.search_limit),
        "namespace": "0",
        "format": "json",
    }


def build_pageimages_params(title: str, cfg: Optional[WikipediaConfig] = None) -> Dict[str, str]:
    cfg = cfg or get_wikipedia_config()
    return {
        "origin": "*",
        "action": "query",
        "titles": title,
        "prop": "pageimages",
        "format": "json",
        "pithumbsize": str(cfg.thumb_size),
    }


def parse_opensearch(payload: Any) -> List[str]:
    """opensearch answers `[query, [titles], [descriptions], [urls]]`."""
    try:
        titles = payload[1]
    except Exception:
        return []
    if not isinstance(titles, list):
        return []
    return [t for t in titles if isinstance(t, str) and t]


def parse_pageimage(payload: Dict[str, Any]) -> Optional[str]:
    # Only the first page is considered; a missing page has no thumbnail either.
    try:
        pages = payload["query"]["pages"]
        first = next(iter(pages.values()))
        return first["thumbnail"]["source"] or None
    except Exception:
        return None


class WikipediaClient:
    """Async lookup against Wikipedia: `await client.resolve("lebron_james")`."""

    def __init__(self, cfg: Optional[WikipediaConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.cfg = cfg or get_wikipedia_config()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.cfg.http_timeout,
            headers={"User-Agent": self.cfg.user_agent},
        )

    async def __aenter__(self) -> "WikipediaClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, params: Dict[str, str]) -> Any:
        r = await self._client.get(self.cfg.api_url, params=params)
        r.raise_for_status()
        return r.json()

    async def search_titles(self, query: str) -> List[str]:
        payload = await self._get_json(build_opensearch_params(query, self.cfg))
        return parse_opensearch(payload)[: self.cfg.search_limit]

    async def page_image_url(self, title: str) -> Optional[str]:
        payload = await self._get_json(build_pageimages_params(title, self.cfg))
        return parse_pageimage(payload)

    async def resolve(self, candidate: str) -> Optional[Tuple[str, str]]:
        """First (title, image url) among the search hits for `candidate`, else None."""
        try:
            titles = await self.search_titles(candidate)
            for title in titles:
                image_url = await self.page_image_url(title)
                if image_url:
                    return title, image_url
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers undecodable JSON bodies
            logger.warning("wikipedia lookup for %r failed: %s", candidate, e)
        return None

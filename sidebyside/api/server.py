from __future__ import annotations
from flask import Flask, request, jsonify
from sidebyside.config.env import get_resolver_config
from sidebyside.ingestion.wikipedia_client import WikipediaClient
from sidebyside.resolver.core import resolve_tokens
from sidebyside.resolver.query import is_side_by_side, tokenize_query
from sidebyside.resolver.types import Resolution

import logging
import os
import threading
import time
from collections import deque

logger = logging.getLogger(__name__)

app = Flask(__name__)
# Keys are entity names in discovery order; keep that order in responses.
app.json.sort_keys = False

BAD_TOKENS = 'queryTokens must be a list of strings'


def _setting(name: str, default: str) -> str:
    """app.config wins over the environment, so tests can override either."""
    value = app.config.get(name)
    if value is None:
        value = os.environ.get(name, default)
    return value


class ClientWindows:
    """Sliding-window request counter per client address.

    Clients whose window has emptied are forgotten, so the table only holds
    addresses seen within the last window.
    """

    def __init__(self):
        self._seen: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._seen)

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()

    def _expire(self, now: float, window: float) -> None:
        for ip in list(self._seen):
            stamps = self._seen[ip]
            while stamps and now - stamps[0] > window:
                stamps.popleft()
            if not stamps:
                del self._seen[ip]

    def hit(self, ip: str, limit: int, window: float) -> float | None:
        """Record a request; returns seconds to wait instead when over `limit`."""
        now = time.time()
        with self._lock:
            self._expire(now, window)
            stamps = self._seen.setdefault(ip, deque())
            if len(stamps) >= limit:
                return max(0.0, window - (now - stamps[0]))
            stamps.append(now)
        return None


_windows = ClientWindows()


def _client_ip() -> str:
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _unauthorized():
    expected = app.config['API_KEY'] if 'API_KEY' in app.config else os.environ.get('API_KEY')
    if expected and request.headers.get('X-API-Key') != expected:
        return jsonify({'error': 'unauthorized'}), 401
    return None


def _rate_limited():
    limit = int(_setting('RATE_LIMIT_N', '5'))
    if limit <= 0:
        return None
    retry = _windows.hit(_client_ip(), limit, float(_setting('RATE_LIMIT_WINDOW_SEC', '1.0')))
    if retry is None:
        return None
    resp = jsonify({'error': 'rate_limited'})
    resp.status_code = 429
    resp.headers['Retry-After'] = f"{retry:.2f}"
    return resp


@app.before_request
def _guard_resolver():
    # Health checks stay open
    if request.path != '/sidebyside':
        return None
    denied = _unauthorized()
    if denied is None and request.method == 'POST':
        denied = _rate_limited()
    return denied


def _query_tokens(payload) -> list[str] | None:
    """Tokens from `queryTokens`, or from a raw `q` query; None when malformed."""
    if not isinstance(payload, dict):
        return None
    tokens = payload.get('queryTokens')
    if tokens is None and isinstance(payload.get('q'), str):
        # Only "side by side" queries are resolved
        if not is_side_by_side(payload['q']):
            return []
        return tokenize_query(payload['q'])
    if not isinstance(tokens, list) or not all(isinstance(t, str) for t in tokens):
        return None
    return tokens


async def _resolve(tokens: list[str]) -> Resolution:
    cfg = get_resolver_config()
    lookup = app.config.get('LOOKUP')
    if lookup is not None:
        return await resolve_tokens(tokens, lookup, positional_quotes=cfg.positional_quotes, timeout=cfg.lookup_timeout)
    async with WikipediaClient() as client:
        return await resolve_tokens(tokens, client.resolve, positional_quotes=cfg.positional_quotes, timeout=cfg.lookup_timeout)


@app.post('/sidebyside')
async def post_sidebyside():
    payload = request.get_json(force=True, silent=True)
    tokens = _query_tokens({} if payload is None else payload)
    if tokens is None:
        return jsonify({'error': BAD_TOKENS}), 400
    result = await _resolve(tokens)
    logger.info("resolved %d entities from %d tokens (%d unresolved)",
                len(result.entities), len(tokens), len(result.remaining))
    return jsonify(result.to_dict())


@app.get('/healthz')
def healthz():
    return jsonify({'status': 'ok'})


if __name__ == '__main__':
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '8000')))

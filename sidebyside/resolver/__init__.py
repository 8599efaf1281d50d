"""Entity Resolver package.

Resolves the tokens of a "side by side" query to canonical entity names with images.
Quoted spans first (`quotes.py`), then greedy prefix guesses (`guesses.py`) driven by
`core.py` against an async lookup. See `sidebyside/ingestion/wikipedia_client.py`.
"""

from .core import resolve_tokens
from .types import Resolution, ResolvedEntity

from __future__ import annotations
from typing import Dict, Optional, Sequence, Tuple
import asyncio
import logging

from sidebyside.resolver.guesses import guess_order
from sidebyside.resolver.quotes import extract_quoted
from sidebyside.resolver.types import Lookup, Match, Resolution, ResolvedEntity

logger = logging.getLogger(__name__)


def guarded(lookup: Lookup, timeout: Optional[float] = None) -> Lookup:
    """Wrap a lookup so that failures and timeouts read as "no match"."""

    async def _lookup(text: str) -> Optional[Match]:
        try:
            if timeout is None:
                return await lookup(text)
            return await asyncio.wait_for(lookup(text), timeout)
        except asyncio.TimeoutError:
            logger.warning("lookup for %r timed out after %.1fs", text, timeout)
        except Exception as e:
            logger.warning("lookup for %r failed: %s", text, e)
        return None

    return _lookup


async def resolve_step(
    tokens: Sequence[str], lookup: Lookup
) -> Tuple[Optional[ResolvedEntity], Tuple[str, ...]]:
    """Try each guessed prefix of `tokens` in order; the first match wins.

    Returns the entity (or None) and the stream left after removing the
    matched prefix. Lookups run one at a time since the order decides the winner.
    """
    tokens = tuple(tokens)
    for length in guess_order(len(tokens)):
        candidate = "_".join(tokens[:length])
        logger.debug("trying %r (%d of %d tokens)", candidate, length, len(tokens))
        match = await lookup(candidate)
        if match is not None:
            name, image_url = match
            return ResolvedEntity(name=name, image_url=image_url), tokens[length:]
    return None, tokens


async def resolve_guessed(tokens: Sequence[str], lookup: Lookup) -> Resolution:
    """Consume the stream from the front until it is empty or a round finds nothing."""
    out = Resolution(remaining=tuple(tokens))
    while out.remaining:
        entity, rest = await resolve_step(out.remaining, lookup)
        if entity is None:
            break
        logger.debug("resolved %r -> %r", out.remaining[: len(out.remaining) - len(rest)], entity.name)
        out.add(entity)
        out.remaining = rest
    if out.remaining:
        logger.debug("left unresolved: %r", out.remaining)
    return out


async def resolve_quoted(names: Sequence[str], lookup: Lookup) -> Dict[str, ResolvedEntity]:
    found: Dict[str, ResolvedEntity] = {}
    for name in names:
        match = await lookup(name)
        if match is None:
            logger.debug("quoted entity %r not found", name)
            continue
        entity = ResolvedEntity(name=match[0], image_url=match[1])
        found[entity.name] = entity
    return found


async def resolve_tokens(
    tokens: Sequence[str],
    lookup: Lookup,
    *,
    positional_quotes: bool = False,
    timeout: Optional[float] = None,
) -> Resolution:
    """Resolve a query's tokens to named entities with images.

    Quoted spans are looked up as-is first; the unquoted residual is then
    grouped greedily. Both phases share one lookup, wrapped so that a failing
    or hanging call only skips that candidate.
    """
    lookup = guarded(lookup, timeout)
    split = extract_quoted(tokens, positional=positional_quotes)
    quoted = Resolution(entities=await resolve_quoted(split.entities, lookup))
    guessed = await resolve_guessed(split.residual, lookup)
    return quoted.merge(guessed)

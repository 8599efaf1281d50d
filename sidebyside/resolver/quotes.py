from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple

QUOTE = '"'


@dataclass(frozen=True)
class QuoteSplit:
    entities: List[str]  # space-joined, quote characters removed
    residual: Tuple[str, ...]


def _opens(token: str, index: int, positional: bool) -> bool:
    if positional:
        # Legacy behaviour: looks at the character at the token's stream position.
        return len(token) > index and token[index] == QUOTE
    return token.startswith(QUOTE)


def quote_boundaries(tokens: Sequence[str], positional: bool = False) -> List[int]:
    """Flat list of span boundaries: even entries open a span, odd entries close it.

    A trailing opening with no matching close is left in the list (odd length).
    """
    bounds: List[int] = []
    inside = False
    for i, token in enumerate(tokens):
        if not inside:
            if _opens(token, i, positional):
                bounds.append(i)
                inside = True
                if not positional and len(token) > 1 and token.endswith(QUOTE):
                    bounds.append(i)
                    inside = False
        elif token.endswith(QUOTE):
            bounds.append(i)
            inside = False
    return bounds


def extract_quoted(tokens: Sequence[str], positional: bool = False) -> QuoteSplit:
    """Split a token stream into quoted entity names and the unquoted residual.

    `positional=True` reproduces the original detection rule, where the opening
    quote is looked up at index `i` of the i-th token instead of at index 0.
    It only agrees with the default rule for very short queries.
    """
    bounds = quote_boundaries(tokens, positional=positional)
    spans = [(bounds[k], bounds[k + 1]) for k in range(0, len(bounds) - 1, 2)]

    entities: List[str] = []
    residual: List[str] = []
    start = 0
    for lo, hi in spans:
        residual.extend(tokens[start:lo])
        name = " ".join(t.replace(QUOTE, "") for t in tokens[lo:hi + 1])
        name = " ".join(name.split())
        if name:
            entities.append(name)
        start = hi + 1
    residual.extend(tokens[start:])
    return QuoteSplit(entities=entities, residual=tuple(residual))

from __future__ import annotations
from typing import List
import re

TRIGGER = re.compile(r"side by side", re.IGNORECASE)


def is_side_by_side(query: str) -> bool:
    return bool(query) and TRIGGER.search(query) is not None


def tokenize_query(query: str) -> List[str]:
    """Drop the first "side by side" trigger and split the rest on whitespace."""
    return TRIGGER.sub("", query or "", count=1).split()

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Tuple

# (canonical name, image url) as reported by a lookup
Match = Tuple[str, str]

# resolve(candidate_text) -> Match, or None for "no match"
Lookup = Callable[[str], Awaitable[Optional[Match]]]


@dataclass(frozen=True)
class ResolvedEntity:
    name: str
    image_url: str

    def to_dict(self) -> Dict[str, str]:
        return {"imageURL": self.image_url}


@dataclass
class Resolution:
    entities: Dict[str, ResolvedEntity] = field(default_factory=dict)  # canonical name -> entity, discovery order
    remaining: Tuple[str, ...] = ()  # tokens nothing matched

    def add(self, entity: ResolvedEntity) -> None:
        self.entities[entity.name] = entity

    def merge(self, other: "Resolution") -> "Resolution":
        entities = dict(self.entities)
        entities.update(other.entities)
        return Resolution(entities=entities, remaining=other.remaining)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {name: e.to_dict() for name, e in self.entities.items()}

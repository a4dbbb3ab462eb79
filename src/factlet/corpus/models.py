"""Data models for the factlet corpus."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Category(Enum):
    """Topical tag of a factlet.

    ALL is a wildcard meaning "every concrete category"; it never appears on
    a factlet itself.
    """

    ALL = "All"
    SCIENCE = "Science"
    HISTORY = "History"
    NATURE = "Nature"
    LANGUAGE = "Language"
    CULTURE = "Culture"
    HUMAN_BODY = "Human Body"
    GEOGRAPHY = "Geography"
    TECHNOLOGY = "Technology"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def is_wildcard(self) -> bool:
        return self is Category.ALL

    @classmethod
    def concrete(cls) -> tuple[Category, ...]:
        """All categories except the wildcard, in declaration order."""
        return tuple(c for c in cls if c is not cls.ALL)

    @classmethod
    def parse(cls, name: str) -> Category:
        """Resolve a category from its value or member name, case-insensitively.

        Raises:
            ValueError: If the name matches no category.
        """
        key = name.strip().lower().replace("_", " ")
        for category in cls:
            if key in (category.value.lower(), category.name.lower().replace("_", " ")):
                return category
        raise ValueError(f"Unknown category: {name}")


class Level(Enum):
    """Difficulty tier of a factlet, ordered from easiest to hardest."""

    LEVEL_1 = "level1"
    LEVEL_2 = "level2"
    LEVEL_3 = "level3"

    @property
    def display_name(self) -> str:
        return f"Level {self.rank}"

    @property
    def rank(self) -> int:
        return list(Level).index(self) + 1

    @classmethod
    def lowest(cls) -> Level:
        return cls.LEVEL_1

    @classmethod
    def parse(cls, name: str) -> Level:
        """Resolve a level from "level2", "Level 2", "LEVEL_2" or "2".

        Raises:
            ValueError: If the name matches no level.
        """
        key = name.strip().lower().replace(" ", "").replace("_", "")
        for level in cls:
            if key in (level.value, str(level.rank)):
                return level
        raise ValueError(f"Unknown level: {name}")


@dataclass(frozen=True)
class Factlet:
    """A single short fact.

    Attributes:
        id: Stable opaque identifier (e.g., 'F001').
        text: The fact itself.
        category: Concrete topical category.
        level: Difficulty tier.
    """

    id: str
    text: str
    category: Category
    level: Level = Level.LEVEL_1

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category.value,
            "level": self.level.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Factlet:
        """Create from a dictionary.

        Older records stored the text under "fact" and had no level; both
        shapes are accepted.

        Raises:
            KeyError, ValueError, TypeError: If the record is unusable.
        """
        text = data["text"] if "text" in data else data["fact"]
        level = Level(data["level"]) if data.get("level") else Level.lowest()
        category = Category(data["category"])
        if category.is_wildcard:
            raise ValueError("A factlet cannot carry the wildcard category")
        return cls(
            id=str(data["id"]),
            text=str(text),
            category=category,
            level=level,
        )

"""
This module defines the `PriorityLevel` enumeration, the importance lattice attached to every
value of a requirement set. Levels are totally ordered by rank: a lower rank is a stronger level,
so `min(a, b)` returns the stronger of two levels.
"""
from enum import Enum
from functools import total_ordering

from utils.exceptions import InvalidLevelError


@total_ordering
class PriorityLevel(Enum):
    """
    Importance of a requirement value for an analysis, from strongest to weakest.

    Attributes:
        MANDATORY: The value must be present at runtime for the analysis to work.
        OPTIONAL: The value could be absent and the analysis would still work.
        INFORMATIVE: The value is only reported to the user, it never blocks the analysis.
    """
    MANDATORY = 0
    OPTIONAL = 1
    INFORMATIVE = 2

    @property
    def rank(self) -> int:
        return self.value

    def __lt__(self, other):
        if not isinstance(other, PriorityLevel):
            return NotImplemented
        return self.rank < other.rank

    def capped(self, cap: "PriorityLevel") -> "PriorityLevel":
        """
        Constrains this level so that it is never stronger than `cap`.

        Args:
            cap (PriorityLevel): The strongest level allowed.

        Returns:
            PriorityLevel: `cap` if this level is stronger than it, otherwise this level unchanged.
        """
        if self < cap:
            return cap
        return self

    @staticmethod
    def stronger(first: "PriorityLevel", second: "PriorityLevel") -> "PriorityLevel":
        """Returns the stronger of two levels (the one with the lower rank)."""
        return min(first, second)

    @classmethod
    def from_name(cls, name: str) -> "PriorityLevel":
        """
        Looks up a level by its name, ignoring case and surrounding whitespace.

        Args:
            name (str): The level name, e.g. "mandatory" or "Optional".

        Returns:
            PriorityLevel: The matching level.

        Raises:
            InvalidLevelError: If the name does not match any level.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise InvalidLevelError(f"Priority level must be a string, got {type(name).__name__}")
        try:
            return cls[name.strip().upper()]
        except KeyError:
            known = ", ".join(level.name.lower() for level in cls)
            raise InvalidLevelError(f"Unknown priority level '{name}'. Must be one of: {known}.") from None

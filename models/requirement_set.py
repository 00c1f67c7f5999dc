"""
This module defines the `RequirementSet` class, which holds every value of one requirement type
needed by an analysis in order to execute. Each value is paired with a `PriorityLevel` telling how
important that specific value is for the analysis.

The type gives an indication about the kind of value the set contains. For instance, a requirement
type could be "event" and all the values added to the set would name the events handled by the analysis.
"""
from typing import Dict, Iterable, List, Optional, Any

from logs.logger import log_debug
from models.priority_level import PriorityLevel


class RequirementSet:
    """
    The values of one requirement type, each with a unique name and a priority level,
    plus a free-text log of informations about the requirement.

    Attributes:
        type (str): The requirement type. Read only.
    """

    def __init__(self, type: str, values: Optional[Iterable[str]] = None,
                 level: Optional[PriorityLevel] = None):
        """
        Creates a requirement set, optionally filled with values that all share one level.

        Args:
            type (str): The type of the requirement.
            values (Optional[Iterable[str]]): Values associated with that type. Duplicates collapse to one entry.
            level (Optional[PriorityLevel]): The level given to every value in `values`.
                                             Required when `values` is given.
        """
        self._type = type
        self._values: Dict[str, PriorityLevel] = {}
        self._informations: List[str] = []
        if values is not None:
            if level is None:
                raise ValueError("A level is required to initialize a requirement set with values")
            self.add_values(values, level)

    @property
    def type(self) -> str:
        return self._type

    def get_type(self) -> str:
        """Gets the requirement type. The type is read only."""
        return self._type

    def add_value(self, value: str, level: PriorityLevel) -> bool:
        """
        Adds a value with its level. An existing value is never modified: use
        `modify_value_level` for that.

        Args:
            value (str): The value.
            level (PriorityLevel): The level.

        Returns:
            bool: True if the value was added, False if it was already present.
        """
        if value in self._values:
            return False
        self._values[value] = level
        return True

    def add_values(self, values: Iterable[str], level: PriorityLevel) -> None:
        """
        Adds several values with the same level. Values already present are skipped.

        Args:
            values (Iterable[str]): The values to add.
            level (PriorityLevel): The level associated with all the values.
        """
        for value in values:
            self.add_value(value, level)

    def modify_value_level(self, value: str, level: PriorityLevel) -> bool:
        """
        Replaces the level of an existing value. The new level may be weaker than the old one.

        Args:
            value (str): The value to be modified.
            level (PriorityLevel): The new level to be associated with the value.

        Returns:
            bool: True if the value existed and was updated, False if it is absent (nothing is inserted).
        """
        if value not in self._values:
            return False
        self._values[value] = level
        return True

    def get_value_level(self, value: str) -> Optional[PriorityLevel]:
        """Gets the level of a value, or None if the value is not part of the requirement."""
        return self._values.get(value)

    def get_values(self) -> List[str]:
        """Gets a snapshot of all the values of the requirement."""
        return list(self._values)

    def add_information(self, information: str) -> None:
        """Appends a note about the requirement. Duplicates are kept."""
        self._informations.append(information)

    def get_informations(self) -> List[str]:
        """Gets the informations about the requirement, in the order they were added."""
        return list(self._informations)

    def merge(self, source: "RequirementSet", cap_level: Optional[PriorityLevel] = None) -> None:
        """
        Merges another requirement set into this one. `source` is left unmodified.

        A value missing from this set is added with the source's level. A value present on
        both sides keeps the stronger of the two levels. When `cap_level` is given, any source
        level stronger than the cap is first weakened to exactly the cap.

        Args:
            source (RequirementSet): The requirement set to be merged, usually a sub-analysis' one.
            cap_level (Optional[PriorityLevel]): The strongest level a source value may bring in.
                                                 None merges the source levels as they are.
        """
        if source.type != self._type:
            log_debug(f"Merging requirement of type '{source.type}' into type '{self._type}'")

        for value in source.get_values():
            source_level = source.get_value_level(value)
            if cap_level is not None:
                source_level = source_level.capped(cap_level)

            current_level = self.get_value_level(value)
            if current_level is None:
                self.add_value(value, source_level)
            else:
                self.modify_value_level(value, PriorityLevel.stronger(current_level, source_level))

        log_debug(f"Merged {len(source)} value(s) into requirement '{self._type}' "
                  f"(cap: {cap_level.name if cap_level is not None else 'none'}), now {len(self)} value(s)")

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the requirement set to plain data for reporting code.

        Returns:
            Dict[str, Any]: A dictionary with 'type', 'values' (value name -> level name)
                            and 'informations'.
        """
        return {
            "type": self._type,
            "values": {value: level.name for value, level in self._values.items()},
            "informations": self.get_informations(),
        }

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __repr__(self) -> str:
        levels = ", ".join(f"{value}={level.name}" for value, level in self._values.items())
        return f"RequirementSet(type={self._type!r}, values={{{levels}}})"

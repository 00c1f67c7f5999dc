import json
from typing import Any, Dict, List, Optional, Tuple

from config import config
from logs.logger import log_error
from models.priority_level import PriorityLevel
from models.requirement_set import RequirementSet
from utils.exceptions import RequirementParseError


def _list_of_strings(item: Dict[str, Any], key: str, requirement_type: str) -> List[str]:
    entries = item.get(key, [])
    if not isinstance(entries, list) or not all(isinstance(entry, str) for entry in entries):
        raise RequirementParseError(f"'{key}' of requirement '{requirement_type}' must be a list of strings")
    return entries


def _parse_requirement(item: Any) -> RequirementSet:
    if not isinstance(item, dict) or not isinstance(item.get("type"), str):
        raise RequirementParseError("Each requirement must be an object with a string 'type'")

    requirement_type = item["type"]
    requirement = RequirementSet(requirement_type)
    values = item.get("values", [])
    if isinstance(values, dict):
        # Per-value levels: {"sched_switch": "mandatory", ...}
        if "level" in item:
            raise RequirementParseError(
                f"Requirement '{requirement_type}' gives both a 'level' and per-value levels")
        for value, level_name in values.items():
            requirement.add_value(value, PriorityLevel.from_name(level_name))
    elif isinstance(values, list):
        values = _list_of_strings(item, "values", requirement_type)
        if values and "level" not in item:
            raise RequirementParseError(f"Requirement '{requirement_type}' lists values without a 'level'")
        if values:
            requirement.add_values(values, PriorityLevel.from_name(item["level"]))
    else:
        raise RequirementParseError(f"Values of requirement '{requirement_type}' must be a list or an object")

    for information in _list_of_strings(item, "informations", requirement_type):
        requirement.add_information(information)
    return requirement


def _effective_cap(parent_cap: Optional[PriorityLevel],
                   cap: Optional[PriorityLevel]) -> Optional[PriorityLevel]:
    # Nested caps: the weakest one on the path wins.
    if parent_cap is None:
        return cap
    if cap is None:
        return parent_cap
    return max(parent_cap, cap)


def _parse_sub_analyses(items: List[Any], parent_cap: Optional[PriorityLevel],
                        default_cap: Optional[PriorityLevel]) -> List[Tuple[Optional[PriorityLevel], RequirementSet]]:
    sub_requirements = []
    for item in items:
        if not isinstance(item, dict):
            raise RequirementParseError("Each sub-analysis must be an object")
        cap = PriorityLevel.from_name(item["cap"]) if item.get("cap") is not None else default_cap
        cap = _effective_cap(parent_cap, cap)

        for requirement_item in item.get("requirements", []):
            sub_requirements.append((cap, _parse_requirement(requirement_item)))
        sub_requirements.extend(_parse_sub_analyses(item.get("sub_analyses", []), cap, default_cap))
    return sub_requirements


def run(ctx: Dict[str, Any]) -> None:
    """
    Parses the analysis declaration in `ctx["txt"]` into requirement sets.

    Stores the analysis' own sets in `ctx["requirement_sets"]` and every sub-analysis set,
    paired with the cap it is merged with, in `ctx["sub_requirements"]`.

    A requirement gives either a list of string `values` sharing one `level`, or a `values`
    object mapping each value to its own level; giving a `level` alongside per-value levels
    is rejected. `informations` must be a list of strings.

    Raises:
        RequirementParseError: If the declaration is malformed. The error is logged first.
    """
    try:
        data = json.loads(ctx["txt"])
    except json.JSONDecodeError as e:
        log_error(f"Invalid requirement declaration: {e}")
        raise RequirementParseError(f"Invalid JSON format: {e}") from e

    if not isinstance(data, list):
        data = [data]

    requirement_sets = []
    sub_requirements = []
    try:
        default_cap = None
        if config.default_merge_cap:
            default_cap = PriorityLevel.from_name(config.default_merge_cap)

        for item in data:
            if not isinstance(item, dict):
                raise RequirementParseError("Each analysis declaration must be an object")
            requirement_sets.extend(_parse_requirement(req) for req in item.get("requirements", []))
            sub_requirements.extend(_parse_sub_analyses(item.get("sub_analyses", []), None, default_cap))
    except RequirementParseError as e:
        log_error(f"Invalid requirement declaration: {e}")
        raise

    ctx["requirement_sets"] = requirement_sets
    ctx["sub_requirements"] = sub_requirements

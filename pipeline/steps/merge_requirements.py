"""
This module implements the Merge Requirements step of the aggregation pipeline.
It folds the requirement sets of every sub-analysis into the analysis' own requirement sets,
producing one aggregate set per requirement type.
"""
from typing import Dict, Any

from logs.logger import log_info
from models.requirement_set import RequirementSet


def run(ctx: Dict[str, Any]) -> None:
    """
    Executes the Merge Requirements step. The analysis' own sets are merged first, uncapped,
    then each sub-analysis set is merged with the cap it was declared with.

    Args:
        ctx (Dict[str, Any]): The pipeline context dictionary, which must contain:
                              - 'requirement_sets' (list): The analysis' own RequirementSet objects.
                              - 'sub_requirements' (list): (cap level or None, RequirementSet) pairs.
    """
    aggregate: Dict[str, RequirementSet] = {}

    def _aggregate_for(requirement_type: str) -> RequirementSet:
        if requirement_type not in aggregate:
            aggregate[requirement_type] = RequirementSet(requirement_type)
        return aggregate[requirement_type]

    for requirement in ctx.get("requirement_sets", []):
        target = _aggregate_for(requirement.type)
        target.merge(requirement)
        for information in requirement.get_informations():
            target.add_information(information)

    for cap_level, requirement in ctx.get("sub_requirements", []):
        target = _aggregate_for(requirement.type)
        target.merge(requirement, cap_level)
        for information in requirement.get_informations():
            target.add_information(information)

    ctx["aggregate"] = aggregate
    log_info(f"Aggregated requirements for {len(aggregate)} type(s): {', '.join(sorted(aggregate))}")

"""
This module defines the requirement aggregation pipeline steps and provides functionality
to initialize and execute a pipeline run.
"""
import uuid
from typing import Any, Dict, Iterable, Optional

from logs.logger import log_error, log_info
from models.priority_level import PriorityLevel
from models.requirement_set import RequirementSet
from pipeline.steps import parse_json, merge_requirements
from utils.exceptions import PipelineError

# Define the sequence of pipeline steps
# Each tuple contains the step name and the function to execute for that step.
PIPELINE_STEPS = [
    ("Parsing Requirement Declaration", parse_json.run),
    ("Merging Requirements", merge_requirements.run),
]

def initialize_pipeline(txt: str) -> dict:
    """
    Initializes a new pipeline run for an analysis declaration.

    Args:
        txt (str): The JSON declaration of the analysis and its sub-analyses.

    Returns:
        dict: A dictionary containing the initial pipeline context, including:
              - 'run_id' (str): A unique identifier for the current pipeline run.
              - 'txt' (str): The declaration to be processed.
              - 'step_index' (int): The current step index, initialized to 0.
    """
    return {
        "run_id": str(uuid.uuid4()),
        "txt": txt,
        "step_index": 0
    }

def run_pipeline(ctx: dict) -> Dict[str, RequirementSet]:
    """
    Runs every remaining step of the pipeline on the given context.

    Args:
        ctx (dict): A context returned by `initialize_pipeline`. Its 'step_index' is advanced
                    after each successful step, so a failed run can be resumed.

    Returns:
        Dict[str, RequirementSet]: The aggregate requirement set of each requirement type.

    Raises:
        PipelineError: If any step fails.
    """
    while ctx["step_index"] < len(PIPELINE_STEPS):
        step_name, step = PIPELINE_STEPS[ctx["step_index"]]
        try:
            step(ctx)
        except Exception as e:
            log_error(f"Step '{step_name}' failed for run {ctx.get('run_id')}: {e}")
            raise PipelineError(f"Step '{step_name}' failed: {e}") from e
        log_info(f"Step '{step_name}' completed for run {ctx.get('run_id')}")
        ctx["step_index"] += 1
    return ctx["aggregate"]

def aggregate(requirement_type: str, requirements: Iterable[RequirementSet],
              cap_level: Optional[PriorityLevel] = None) -> RequirementSet:
    """
    Merges several requirement sets into a new one of the given type.

    Args:
        requirement_type (str): The type of the aggregate requirement set.
        requirements (Iterable[RequirementSet]): The requirement sets to merge, in any order.
        cap_level (Optional[PriorityLevel]): The cap applied to every merge, None for uncapped merges.

    Returns:
        RequirementSet: The aggregate requirement set. The merged sets are left unmodified.
    """
    result = RequirementSet(requirement_type)
    for requirement in requirements:
        result.merge(requirement, cap_level)
    return result

"""
This module contains unit tests for the requirement aggregation pipeline: declaration parsing,
the merge step and the runner.
"""
import json

import pytest

import config
from models.priority_level import PriorityLevel
from models.requirement_set import RequirementSet
from pipeline.runner import PIPELINE_STEPS, aggregate, initialize_pipeline, run_pipeline
from pipeline.steps import merge_requirements, parse_json
from utils.exceptions import InvalidLevelError, PipelineError, RequirementParseError

MANDATORY = PriorityLevel.MANDATORY
OPTIONAL = PriorityLevel.OPTIONAL
INFORMATIVE = PriorityLevel.INFORMATIVE

DECLARATION = {
    "analysis": "cpu-usage",
    "requirements": [
        {
            "type": "event",
            "level": "mandatory",
            "values": ["sched_switch", "sched_process_exit"],
            "informations": ["Trace the kernel with scheduling events"],
        },
        {"type": "domain", "values": {"kernel": "mandatory"}},
    ],
    "sub_analyses": [
        {
            "analysis": "irq",
            "cap": "optional",
            "requirements": [
                {"type": "event", "values": {"irq_handler_entry": "mandatory", "sched_switch": "informative"}},
            ],
        },
        {
            "analysis": "process-names",
            "requirements": [
                {"type": "event", "level": "mandatory", "values": ["sched_process_fork"]},
                {"type": "context", "level": "informative", "values": ["procname"]},
            ],
        },
    ],
}


@pytest.fixture(autouse=True)
def no_default_cap(monkeypatch):
    monkeypatch.setattr(config.config, "default_merge_cap", None)


def test_parse_json_builds_requirement_sets():
    ctx = {"txt": json.dumps(DECLARATION)}
    parse_json.run(ctx)

    own = ctx["requirement_sets"]
    assert [requirement.type for requirement in own] == ["event", "domain"]
    assert own[0].get_value_level("sched_switch") is MANDATORY
    assert own[0].get_informations() == ["Trace the kernel with scheduling events"]
    assert own[1].get_value_level("kernel") is MANDATORY

    caps = [cap for cap, _ in ctx["sub_requirements"]]
    assert caps == [OPTIONAL, None, None]


def test_parse_json_nested_sub_analyses_keep_weakest_cap():
    declaration = {
        "sub_analyses": [{
            "cap": "optional",
            "sub_analyses": [
                {"cap": "mandatory", "requirements": [{"type": "event", "level": "mandatory", "values": ["a"]}]},
                {"cap": "informative", "requirements": [{"type": "event", "level": "mandatory", "values": ["b"]}]},
                {"requirements": [{"type": "event", "level": "mandatory", "values": ["c"]}]},
            ],
        }],
    }
    ctx = {"txt": json.dumps(declaration)}
    parse_json.run(ctx)
    assert [cap for cap, _ in ctx["sub_requirements"]] == [OPTIONAL, INFORMATIVE, OPTIONAL]


def test_parse_json_uses_default_cap(monkeypatch):
    monkeypatch.setattr(config.config, "default_merge_cap", "informative")
    ctx = {"txt": json.dumps(DECLARATION)}
    parse_json.run(ctx)
    assert [cap for cap, _ in ctx["sub_requirements"]] == [OPTIONAL, INFORMATIVE, INFORMATIVE]


def test_parse_json_invalid_json():
    with pytest.raises(RequirementParseError):
        parse_json.run({"txt": "{not json"})


def test_parse_json_unknown_level():
    declaration = {"requirements": [{"type": "event", "level": "critical", "values": ["a"]}]}
    with pytest.raises(InvalidLevelError):
        parse_json.run({"txt": json.dumps(declaration)})


def test_parse_json_missing_type_or_level():
    with pytest.raises(RequirementParseError):
        parse_json.run({"txt": json.dumps({"requirements": [{"level": "optional", "values": ["a"]}]})})
    with pytest.raises(RequirementParseError):
        parse_json.run({"txt": json.dumps({"requirements": [{"type": "event", "values": ["a"]}]})})


@pytest.mark.parametrize("values", [[["a"]], ["a", 1], [None]])
def test_parse_json_rejects_non_string_values(values):
    """Tests that value names which are not strings are reported as a parse error."""
    declaration = {"requirements": [{"type": "event", "level": "mandatory", "values": values}]}
    with pytest.raises(RequirementParseError):
        parse_json.run({"txt": json.dumps(declaration)})


def test_parse_json_rejects_non_string_type():
    declaration = {"requirements": [{"type": ["event"], "level": "mandatory", "values": ["a"]}]}
    with pytest.raises(RequirementParseError):
        parse_json.run({"txt": json.dumps(declaration)})


@pytest.mark.parametrize("informations", ["needs kernel trace", ["ok", 3], {"note": "x"}])
def test_parse_json_rejects_informations_that_are_not_a_list_of_strings(informations):
    """Tests that a lone string is not split into one note per character."""
    declaration = {"requirements": [{"type": "event", "informations": informations}]}
    with pytest.raises(RequirementParseError):
        parse_json.run({"txt": json.dumps(declaration)})


def test_parse_json_rejects_level_with_per_value_levels():
    declaration = {"requirements": [{"type": "event", "level": "mandatory", "values": {"a": "optional"}}]}
    with pytest.raises(RequirementParseError):
        parse_json.run({"txt": json.dumps(declaration)})


def test_merge_requirements_step():
    ctx = {"txt": json.dumps(DECLARATION)}
    parse_json.run(ctx)
    merge_requirements.run(ctx)

    result = ctx["aggregate"]
    assert sorted(result) == ["context", "domain", "event"]

    events = result["event"]
    assert events.get_value_level("sched_switch") is MANDATORY
    assert events.get_value_level("sched_process_exit") is MANDATORY
    # Capped at OPTIONAL by the irq sub-analysis
    assert events.get_value_level("irq_handler_entry") is OPTIONAL
    assert events.get_value_level("sched_process_fork") is MANDATORY
    assert events.get_informations() == ["Trace the kernel with scheduling events"]

    assert result["context"].get_value_level("procname") is INFORMATIVE


def test_run_pipeline():
    ctx = initialize_pipeline(json.dumps(DECLARATION))
    assert ctx["step_index"] == 0

    result = run_pipeline(ctx)

    assert ctx["step_index"] == len(PIPELINE_STEPS)
    assert result is ctx["aggregate"]
    assert len(result["event"]) == 4


def test_run_pipeline_wraps_step_failures():
    ctx = initialize_pipeline("[1, 2]")
    with pytest.raises(PipelineError) as excinfo:
        run_pipeline(ctx)
    assert isinstance(excinfo.value.__cause__, RequirementParseError)
    assert ctx["step_index"] == 0


def test_aggregate_helper():
    first = RequirementSet("event", ["a", "b"], MANDATORY)
    second = RequirementSet("event", ["b", "c"], OPTIONAL)

    uncapped = aggregate("event", [first, second])
    assert uncapped.get_value_level("a") is MANDATORY
    assert uncapped.get_value_level("b") is MANDATORY
    assert uncapped.get_value_level("c") is OPTIONAL

    capped = aggregate("event", [first, second], INFORMATIVE)
    assert {capped.get_value_level(value) for value in capped.get_values()} == {INFORMATIVE}
    assert first.get_value_level("a") is MANDATORY

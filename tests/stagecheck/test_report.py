from services.stagecheck.app.domain.report import HINTS, format_report, report_to_dict
from services.stagecheck.app.domain.types import Plan, Report, Stage, ViolationKind
from services.stagecheck.app.domain.validator import validate


def _scenario_report() -> Report:
    return validate(
        Plan(
            stages=(
                Stage.build(1, "API", [2], ["works"]),
                Stage.build(2, "DB", [], ["Migrations pass"]),
            )
        )
    )


def test_every_kind_has_a_hint():
    assert set(HINTS) == set(ViolationKind)


def test_format_valid_report():
    assert format_report(Report()) == "Plan is valid: no violations found."


def test_format_invalid_report_lists_violations_with_hints():
    text = format_report(_scenario_report())
    lines = text.splitlines()

    assert lines[0] == "Plan is invalid: 2 violations found."
    assert lines[1].startswith("  [ForwardOrSelfDependency] stage 1 -> 2:")
    assert lines[2].strip().startswith("hint: Dependencies point down")
    assert "[VagueCriteria] stage 1:" in lines[3]


def test_report_to_dict_is_json_ready():
    payload = report_to_dict(_scenario_report())

    assert payload["valid"] is False
    assert payload["violationCount"] == 2
    assert payload["byKind"] == {"ForwardOrSelfDependency": 1, "VagueCriteria": 1}
    assert payload["violations"][0]["relatedStageId"] == 2
    assert payload["violations"][1]["criterion"] == "works"
    assert payload["violations"][1]["hint"] == HINTS[ViolationKind.vague_criteria]

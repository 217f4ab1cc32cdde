"""Plan report rendering helpers."""
from __future__ import annotations

from collections import Counter
from typing import Any

from .types import Report, Violation, ViolationKind

HINTS: dict[ViolationKind, str] = {
    ViolationKind.duplicate_id: "Give every stage its own id, numbered in build order.",
    ViolationKind.duplicate_name: "Define each component in exactly one stage; merge or rename the repeated stage.",
    ViolationKind.unknown_dependency: "Reference only stages that exist in the plan, or add the missing stage.",
    ViolationKind.forward_or_self_dependency: "Dependencies point down: move the dependency to an earlier stage or reorder the stages.",
    ViolationKind.cyclic_dependency: "Break the cycle so the stage graph is a DAG; extract the shared part into an earlier stage.",
    ViolationKind.missing_criteria: "Add at least one verifiable completion criterion.",
    ViolationKind.vague_criteria: "Replace the subjective term with a measurable check (a test, command or observable result).",
}


def _stage_label(violation: Violation) -> str:
    if violation.related_stage_id is None:
        return f"stage {violation.stage_id}"
    return f"stage {violation.stage_id} -> {violation.related_stage_id}"


def violation_to_dict(violation: Violation) -> dict[str, Any]:
    return {
        "kind": violation.kind.value,
        "stageId": violation.stage_id,
        "relatedStageId": violation.related_stage_id,
        "detail": violation.detail,
        "criterion": violation.criterion,
        "hint": HINTS[violation.kind],
    }


def report_to_dict(report: Report) -> dict[str, Any]:
    counts = Counter(violation.kind.value for violation in report.violations)
    return {
        "valid": report.valid,
        "violationCount": len(report.violations),
        "byKind": dict(sorted(counts.items())),
        "violations": [violation_to_dict(violation) for violation in report.violations],
    }


def format_report(report: Report) -> str:
    """Render a multi-line, human-readable summary of a report."""
    if report.valid:
        return "Plan is valid: no violations found."
    count = len(report.violations)
    lines = [f"Plan is invalid: {count} violation{'s' if count != 1 else ''} found."]
    for violation in report.violations:
        lines.append(f"  [{violation.kind.value}] {_stage_label(violation)}: {violation.detail}")
        lines.append(f"      hint: {HINTS[violation.kind]}")
    return "\n".join(lines)


__all__ = ["HINTS", "format_report", "report_to_dict", "violation_to_dict"]

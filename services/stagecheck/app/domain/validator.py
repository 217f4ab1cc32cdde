"""Structural validation of implementation plans.

A plan is checked in four passes: uniqueness of ids and names, dependency
references, dependency cycles and completion criteria. Every problem becomes a
``Violation``; nothing here raises for a plan that could be constructed.
Violations are ordered by stage declaration, then by pass.
"""
from __future__ import annotations

from typing import Dict, List

from ..config import DEFAULT_FILLER_WORDS, DEFAULT_VAGUE_TERMS
from .criteria import VagueTermRules, is_vague
from .types import Plan, Report, Stage, Violation, ViolationKind

DEFAULT_RULES = VagueTermRules.from_lists(DEFAULT_VAGUE_TERMS, DEFAULT_FILLER_WORDS)

_UNVISITED, _IN_PROGRESS, _DONE = 0, 1, 2


def _check_uniqueness(stages: tuple[Stage, ...], found: List[List[Violation]]) -> Dict[int, int]:
    first_by_id: Dict[int, int] = {}
    first_by_name: Dict[str, int] = {}
    for idx, stage in enumerate(stages):
        if stage.id in first_by_id:
            original = stages[first_by_id[stage.id]]
            found[idx].append(
                Violation(
                    kind=ViolationKind.duplicate_id,
                    stage_id=stage.id,
                    detail=f"Stage id {stage.id} is already used by stage '{original.name}'",
                )
            )
        else:
            first_by_id[stage.id] = idx

        if stage.name in first_by_name:
            original = stages[first_by_name[stage.name]]
            found[idx].append(
                Violation(
                    kind=ViolationKind.duplicate_name,
                    stage_id=stage.id,
                    related_stage_id=original.id,
                    detail=f"Stage name '{stage.name}' is already defined by stage {original.id}",
                )
            )
        else:
            first_by_name[stage.name] = idx
    return first_by_id


def _check_references(stages: tuple[Stage, ...], first_by_id: Dict[int, int], found: List[List[Violation]]) -> None:
    for idx, stage in enumerate(stages):
        for dep in stage.depends_on:
            if dep not in first_by_id:
                found[idx].append(
                    Violation(
                        kind=ViolationKind.unknown_dependency,
                        stage_id=stage.id,
                        related_stage_id=dep,
                        detail=f"Stage {stage.id} depends on unknown stage {dep}",
                    )
                )
            elif dep >= stage.id:
                detail = (
                    f"Stage {stage.id} depends on itself"
                    if dep == stage.id
                    else f"Stage {stage.id} depends on later stage {dep}"
                )
                found[idx].append(
                    Violation(
                        kind=ViolationKind.forward_or_self_dependency,
                        stage_id=stage.id,
                        related_stage_id=dep,
                        detail=detail,
                    )
                )


def _check_cycles(stages: tuple[Stage, ...], first_by_id: Dict[int, int], found: List[List[Violation]]) -> None:
    # Edges point from a stage to the first stage carrying each dependency id.
    # Self edges are left to the reference pass.
    edges: List[List[int]] = [
        [first_by_id[dep] for dep in stage.depends_on if dep in first_by_id and dep != stage.id]
        for stage in stages
    ]
    state = [_UNVISITED] * len(stages)

    for root in range(len(stages)):
        if state[root] != _UNVISITED:
            continue
        state[root] = _IN_PROGRESS
        stack: List[tuple[int, int]] = [(root, 0)]
        while stack:
            node, next_edge = stack[-1]
            if next_edge == len(edges[node]):
                state[node] = _DONE
                stack.pop()
                continue
            stack[-1] = (node, next_edge + 1)
            target = edges[node][next_edge]
            if state[target] == _IN_PROGRESS:
                source_id, target_id = stages[node].id, stages[target].id
                found[node].append(
                    Violation(
                        kind=ViolationKind.cyclic_dependency,
                        stage_id=source_id,
                        related_stage_id=target_id,
                        detail=f"Dependency of stage {source_id} on stage {target_id} closes a cycle",
                    )
                )
            elif state[target] == _UNVISITED:
                state[target] = _IN_PROGRESS
                stack.append((target, 0))


def _check_criteria(stages: tuple[Stage, ...], rules: VagueTermRules, found: List[List[Violation]]) -> None:
    for idx, stage in enumerate(stages):
        if not stage.completion_criteria:
            found[idx].append(
                Violation(
                    kind=ViolationKind.missing_criteria,
                    stage_id=stage.id,
                    detail=f"Stage {stage.id} '{stage.name}' declares no completion criteria",
                )
            )
            continue
        for criterion in stage.completion_criteria:
            if is_vague(criterion, rules):
                found[idx].append(
                    Violation(
                        kind=ViolationKind.vague_criteria,
                        stage_id=stage.id,
                        criterion=criterion,
                        detail=f"Criterion '{criterion}' of stage {stage.id} is not verifiable",
                    )
                )


def validate(plan: Plan, rules: VagueTermRules | None = None) -> Report:
    """Return a report listing every structural rule the plan breaks."""
    stages = plan.stages
    found: List[List[Violation]] = [[] for _ in stages]

    first_by_id = _check_uniqueness(stages, found)
    _check_references(stages, first_by_id, found)
    _check_cycles(stages, first_by_id, found)
    _check_criteria(stages, rules or DEFAULT_RULES, found)

    return Report(violations=tuple(violation for per_stage in found for violation in per_stage))


__all__ = ["DEFAULT_RULES", "validate"]

"""Domain-level dataclasses for validating plans."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable


class ViolationKind(enum.Enum):
    duplicate_id = "DuplicateId"
    duplicate_name = "DuplicateName"
    unknown_dependency = "UnknownDependency"
    forward_or_self_dependency = "ForwardOrSelfDependency"
    cyclic_dependency = "CyclicDependency"
    missing_criteria = "MissingCriteria"
    vague_criteria = "VagueCriteria"


@dataclass(frozen=True)
class Stage:
    id: int
    name: str
    depends_on: tuple[int, ...] = ()
    completion_criteria: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        id: int,
        name: str,
        depends_on: Iterable[int] = (),
        completion_criteria: Iterable[str] = (),
    ) -> "Stage":
        """Create a stage, dropping repeated dependency ids but keeping declared order."""
        return cls(
            id=id,
            name=name,
            depends_on=tuple(dict.fromkeys(depends_on)),
            completion_criteria=tuple(completion_criteria),
        )


@dataclass(frozen=True)
class Plan:
    stages: tuple[Stage, ...] = ()

    def __len__(self) -> int:
        return len(self.stages)


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    stage_id: int
    detail: str
    related_stage_id: int | None = None
    criterion: str | None = None


@dataclass(frozen=True)
class Report:
    violations: tuple[Violation, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.violations

    def by_kind(self, kind: ViolationKind) -> list[Violation]:
        return [violation for violation in self.violations if violation.kind is kind]


__all__ = ["Plan", "Report", "Stage", "Violation", "ViolationKind"]

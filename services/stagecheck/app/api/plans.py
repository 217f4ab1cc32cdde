"""Plan validation API."""
from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..domain.checker_service import PlanChecker
from ..domain.report import report_to_dict
from .deps import get_plan_checker

router = APIRouter(prefix="/plans", tags=["plans"])


class PlanValidateRequest(BaseModel):
    stages: List[dict[str, Any]] = Field(description="Stage records with id, name, dependsOn and completionCriteria")


class MarkdownValidateRequest(BaseModel):
    text: str = Field(description="Markdown document containing a stage dependency table")


class ViolationItem(BaseModel):
    kind: str
    stage_id: int = Field(alias="stageId")
    related_stage_id: int | None = Field(default=None, alias="relatedStageId")
    detail: str
    criterion: str | None = None
    hint: str

    model_config = ConfigDict(populate_by_name=True)


class ReportResponse(BaseModel):
    valid: bool
    violation_count: int = Field(alias="violationCount")
    by_kind: dict[str, int] = Field(default_factory=dict, alias="byKind")
    violations: List[ViolationItem] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class RulesResponse(BaseModel):
    vague_terms: List[str] = Field(alias="vagueTerms")
    filler_words: List[str] = Field(alias="fillerWords")

    model_config = ConfigDict(populate_by_name=True)


@router.post("/validate", response_model=ReportResponse)
async def validate_plan(request: PlanValidateRequest, checker: PlanChecker = Depends(get_plan_checker)):
    report = checker.check_document(request.model_dump())
    return ReportResponse(**report_to_dict(report))


@router.post("/validate/markdown", response_model=ReportResponse)
async def validate_markdown(request: MarkdownValidateRequest, checker: PlanChecker = Depends(get_plan_checker)):
    report = checker.check_markdown(request.text)
    return ReportResponse(**report_to_dict(report))


@router.get("/rules", response_model=RulesResponse)
async def get_rules(checker: PlanChecker = Depends(get_plan_checker)):
    return RulesResponse(
        vagueTerms=sorted(checker.rules.terms),
        fillerWords=sorted(checker.rules.filler),
    )


__all__ = ["router"]

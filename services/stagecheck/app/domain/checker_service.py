"""Plan checking orchestration."""
from __future__ import annotations

import time
from typing import Any

import structlog

from ..config import StagecheckSettings, get_settings
from ..observability.otel import get_meter, get_tracer
from .criteria import VagueTermRules
from .errors import InvalidPlanInput
from .ingest import load_plan, parse_stage_table
from .types import Plan, Report
from .validator import validate

logger = structlog.get_logger(__name__)


class PlanChecker:
    def __init__(self, settings: StagecheckSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._rules = VagueTermRules.from_settings(self._settings)
        self._tracer = get_tracer()
        self._violations = get_meter().create_counter(
            "stagecheck.violations",
            unit="1",
            description="Structural violations found in validated plans",
        )

    @property
    def rules(self) -> VagueTermRules:
        return self._rules

    def check(self, plan: Plan, source: str = "records") -> Report:
        with self._tracer.start_as_current_span("stagecheck.validate") as span:
            start = time.perf_counter()
            report = validate(plan, self._rules)
            duration_ms = round((time.perf_counter() - start) * 1000, 3)
            span.set_attribute("stagecheck.stages", len(plan))
            span.set_attribute("stagecheck.violations", len(report.violations))
            span.set_attribute("stagecheck.source", source)
        for violation in report.violations:
            self._violations.add(1, {"kind": violation.kind.value})
        logger.info(
            "plan.validated",
            source=source,
            stages=len(plan),
            violations=len(report.violations),
            valid=report.valid,
            duration_ms=duration_ms,
        )
        return report

    def check_document(self, document: Any) -> Report:
        try:
            plan = load_plan(document, max_stages=self._settings.limits.max_stages)
        except InvalidPlanInput as exc:
            logger.warning("plan.invalid_input", source="records", location=exc.location, message=exc.message)
            raise
        return self.check(plan, source="records")

    def check_markdown(self, text: str) -> Report:
        try:
            plan = parse_stage_table(text)
            if len(plan) > self._settings.limits.max_stages:
                raise InvalidPlanInput(
                    f"plan has {len(plan)} stages, limit is {self._settings.limits.max_stages}", "stages"
                )
        except InvalidPlanInput as exc:
            logger.warning("plan.invalid_input", source="markdown", location=exc.location, message=exc.message)
            raise
        return self.check(plan, source="markdown")


__all__ = ["PlanChecker"]

"""Plan ingestion from structured records and markdown stage tables."""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import InvalidPlanInput
from .types import Plan, Stage

_ID_KEYS = ("id",)
_NAME_KEYS = ("name",)
_DEPENDS_KEYS = ("dependsOn", "depends_on")
_CRITERIA_KEYS = ("completionCriteria", "completion_criteria", "criteria")

_STAGE_HEADERS = {"stage", "#", "id", "stage id", "stage #", "no", "no.", "step"}
_NAME_HEADERS = {"name", "stage name", "component", "title", "focus"}
_DEPENDS_HEADERS = {"depends on", "dependencies", "depends", "dependency", "requires", "prerequisites"}
_CRITERIA_HEADERS = {
    "completion criteria",
    "criteria",
    "done when",
    "acceptance criteria",
    "exit criteria",
    "completion",
}
_NO_DEPENDENCY_CELLS = {"", "-", "--", "—", "–", "none", "n/a", "na"}

_SEPARATOR_RE = re.compile(r"^\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)*\|?\s*$")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")
_CRITERIA_SPLIT_RE = re.compile(r"<br\s*/?>|;", re.IGNORECASE)
_DEPENDS_SPLIT_RE = re.compile(r",|/|\band\b", re.IGNORECASE)
# "3", "Stage 3", "S3", "#3"; anything else in a stage cell is unreadable.
_STAGE_REF_RE = re.compile(r"^(?:stages?\s*|s|#)?(\d+)$", re.IGNORECASE)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require(record: Mapping[str, Any], keys: tuple[str, ...], location: str) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    raise InvalidPlanInput(f"missing required field '{keys[0]}'", f"{location}.{keys[0]}")


def _load_stage(record: Any, location: str) -> Stage:
    if not isinstance(record, Mapping):
        raise InvalidPlanInput("stage record must be an object", location)

    stage_id = _require(record, _ID_KEYS, location)
    if not _is_int(stage_id) or stage_id <= 0:
        raise InvalidPlanInput(f"id must be a positive integer, got {stage_id!r}", f"{location}.id")

    name = _require(record, _NAME_KEYS, location)
    if not isinstance(name, str) or not name.strip():
        raise InvalidPlanInput("name must be a non-empty string", f"{location}.name")

    depends_on = _require(record, _DEPENDS_KEYS, location)
    if isinstance(depends_on, (str, bytes)) or not isinstance(depends_on, Sequence):
        raise InvalidPlanInput("dependsOn must be a list of stage ids", f"{location}.dependsOn")
    for position, dep in enumerate(depends_on):
        if not _is_int(dep):
            raise InvalidPlanInput(f"dependency must be an integer, got {dep!r}", f"{location}.dependsOn[{position}]")

    criteria = _require(record, _CRITERIA_KEYS, location)
    if isinstance(criteria, (str, bytes)) or not isinstance(criteria, Sequence):
        raise InvalidPlanInput("completionCriteria must be a list of strings", f"{location}.completionCriteria")
    for position, criterion in enumerate(criteria):
        if not isinstance(criterion, str):
            raise InvalidPlanInput(
                f"criterion must be a string, got {criterion!r}", f"{location}.completionCriteria[{position}]"
            )

    return Stage.build(id=stage_id, name=name, depends_on=depends_on, completion_criteria=criteria)


def load_plan(document: Any, max_stages: int | None = None) -> Plan:
    """Build a Plan from ``{"stages": [...]}`` or a bare list of stage records."""
    if isinstance(document, Mapping):
        if document.get("stages") is None:
            raise InvalidPlanInput("missing required field 'stages'", "stages")
        records = document["stages"]
    else:
        records = document
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise InvalidPlanInput("stages must be a list of stage records", "stages")
    if max_stages is not None and len(records) > max_stages:
        raise InvalidPlanInput(f"plan has {len(records)} stages, limit is {max_stages}", "stages")
    return Plan(stages=tuple(_load_stage(record, f"stages[{idx}]") for idx, record in enumerate(records)))


@dataclass
class _TableLayout:
    stage: int
    name: int
    depends_on: int
    criteria: int

    @property
    def width(self) -> int:
        return max(self.stage, self.name, self.depends_on, self.criteria) + 1


def _split_row(line: str) -> list[str]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _CELL_SPLIT_RE.split(stripped)]


def _normalize_header(cell: str) -> str:
    return re.sub(r"\s+", " ", cell.strip().strip("*_`").strip()).lower()


def _match_layout(header: list[str]) -> _TableLayout | None:
    columns: dict[str, int] = {}
    for idx, cell in enumerate(header):
        label = _normalize_header(cell)
        for field_name, synonyms in (
            ("stage", _STAGE_HEADERS),
            ("name", _NAME_HEADERS),
            ("depends_on", _DEPENDS_HEADERS),
            ("criteria", _CRITERIA_HEADERS),
        ):
            if label in synonyms and field_name not in columns:
                columns[field_name] = idx
                break
    if len(columns) < 4:
        return None
    return _TableLayout(**columns)


def _stage_ref(cell: str) -> int | None:
    match = _STAGE_REF_RE.match(cell.strip("*_` "))
    if not match or int(match.group(1)) <= 0:
        return None
    return int(match.group(1))


def _parse_dependencies(cell: str, location: str) -> list[int]:
    if cell.strip().lower() in _NO_DEPENDENCY_CELLS:
        return []
    deps: list[int] = []
    for part in _DEPENDS_SPLIT_RE.split(cell):
        part = part.strip()
        if not part:
            continue
        ref = _stage_ref(part)
        if ref is None:
            raise InvalidPlanInput(f"cannot read stage reference {part!r}", location)
        deps.append(ref)
    return deps


def _parse_row(cells: list[str], layout: _TableLayout, location: str) -> Stage:
    if len(cells) < layout.width:
        raise InvalidPlanInput(f"expected {layout.width} cells, found {len(cells)}", location)
    stage_id = _stage_ref(cells[layout.stage])
    if stage_id is None:
        raise InvalidPlanInput(f"cannot read stage id from {cells[layout.stage]!r}", location)
    name = cells[layout.name].strip("*_` ")
    if not name:
        raise InvalidPlanInput("stage name is empty", location)
    criteria = [part.strip() for part in _CRITERIA_SPLIT_RE.split(cells[layout.criteria]) if part.strip()]
    return Stage.build(
        id=stage_id,
        name=name,
        depends_on=_parse_dependencies(cells[layout.depends_on], location),
        completion_criteria=criteria,
    )


def parse_stage_table(text: str) -> Plan:
    """Read the first markdown table that has stage, name, depends-on and criteria columns."""
    lines = text.splitlines()
    idx = 0
    while idx < len(lines) - 1:
        header_line, separator_line = lines[idx].strip(), lines[idx + 1].strip()
        if not header_line.startswith("|") or not _SEPARATOR_RE.match(separator_line):
            idx += 1
            continue
        layout = _match_layout(_split_row(header_line))
        row_idx = idx + 2
        if layout is None:
            idx = row_idx
            continue
        stages: list[Stage] = []
        while row_idx < len(lines) and lines[row_idx].strip().startswith("|"):
            stages.append(_parse_row(_split_row(lines[row_idx]), layout, f"line {row_idx + 1}"))
            row_idx += 1
        return Plan(stages=tuple(stages))
    raise InvalidPlanInput("no stage table with stage, name, depends-on and completion-criteria columns found")


__all__ = ["load_plan", "parse_stage_table"]

"""Explicit validation of task payloads.

Each validator returns a list of ``FieldViolation`` describing every field
that failed, in field order. Only the first failing rule of a field is
reported. ``required`` rejects missing values and zero values (``0``, ``""``
and the nil UUID); ``oneof`` rejects a status outside ``TaskStatus``.
"""
from __future__ import annotations

from typing import Any, List, NamedTuple, Optional
from uuid import UUID

from task_api.core.exceptions import ValidationFailed
from task_api.models.task import TaskStatus
from task_api.schemas.task import TaskInsert, TaskUpdate

NIL_UUID = UUID(int=0)
STATUS_VALUES = tuple(s.value for s in TaskStatus)


class FieldViolation(NamedTuple):
    field: str
    rule: str
    value: Any


def _check_required(field: str, value: Any, zero: Any) -> Optional[FieldViolation]:
    if value is None or value == zero:
        return FieldViolation(field=field, rule="required", value=zero)
    return None


def _common_violations(payload: TaskInsert) -> List[FieldViolation]:
    checks = (
        _check_required("owner_id", payload.owner_id, 0),
        _check_required("title", payload.title, ""),
        _check_required("description", payload.description, ""),
    )
    return [v for v in checks if v is not None]


def validate_task_insert(payload: TaskInsert) -> List[FieldViolation]:
    """Validate a task creation payload."""
    return _common_violations(payload)


def validate_task_update(payload: TaskUpdate) -> List[FieldViolation]:
    """Validate a task update payload."""
    violations: List[FieldViolation] = []

    id_violation = _check_required("id", payload.id, NIL_UUID)
    if id_violation:
        violations.append(id_violation)

    violations.extend(_common_violations(payload))

    status_violation = _check_required("status", payload.status, "")
    if status_violation is None and payload.status not in STATUS_VALUES:
        status_violation = FieldViolation(field="status", rule="oneof", value=payload.status)
    if status_violation:
        violations.append(status_violation)

    return violations


def format_violations(violations: List[FieldViolation]) -> str:
    """Render violations as one human-readable message."""
    return " and ".join(
        f"[{v.field}]: '{v.value}' | Needs to implement '{v.rule}'" for v in violations
    )


def raise_for_violations(violations: List[FieldViolation]) -> None:
    """Raise ``ValidationFailed`` if any violation was found."""
    if violations:
        raise ValidationFailed(format_violations(violations), violations=violations)

"""Typed partial updates for profile and salary data.

Request payloads are never copied key-by-key onto a user. Each role gets an
explicit set of editable fields; anything outside it is rejected before the
update reaches the repository.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping

from ..common.datetime_utils import to_date
from ..common.validators import non_negative_number
from ..core.enums import Gender, MANAGER_ROLES, MaritalStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import DERIVED_SALARY_FIELDS, PROFILE_FIELDS, SALARY_COMPONENT_FIELDS, Profile, SalaryStructure

EMPLOYEE_EDITABLE_FIELDS = frozenset({"phone", "address", "profile_picture_url"})
MANAGER_EDITABLE_FIELDS = frozenset(PROFILE_FIELDS)

_DATE_FIELDS = frozenset({"date_of_birth", "date_of_joining"})
_ENUM_FIELDS = {"gender": Gender, "marital_status": MaritalStatus}


def _coerce_profile_value(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _ENUM_FIELDS:
        try:
            return _ENUM_FIELDS[name](value)
        except ValueError:
            raise ValidationError(f"Invalid value for {name}: {value!r}")
    if name in _DATE_FIELDS:
        try:
            return to_date(value)
        except ValueError:
            raise ValidationError(f"{name} must be a YYYY-MM-DD date")
    if name == "full_name" and not str(value).strip():
        raise ValidationError("full_name cannot be empty")
    return str(value)


@dataclass(frozen=True)
class ProfileUpdate:
    changes: Mapping[str, Any]

    @classmethod
    def for_role(cls, role: Role, payload: Mapping[str, Any]) -> "ProfileUpdate":
        allowed = MANAGER_EDITABLE_FIELDS if role in MANAGER_ROLES else EMPLOYEE_EDITABLE_FIELDS
        changes: dict[str, Any] = {}
        for key, value in (payload or {}).items():
            if key not in allowed:
                if key in MANAGER_EDITABLE_FIELDS:
                    raise AuthorizationError(f"Not allowed to edit {key}")
                raise ValidationError(f"Unknown profile field: {key}")
            # Empty strings for enum fields mean "leave unchanged".
            if key in _ENUM_FIELDS and value == "":
                continue
            changes[key] = _coerce_profile_value(key, value)
        return cls(changes=changes)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    def apply(self, profile: Profile) -> Profile:
        return dataclasses.replace(profile, **dict(self.changes))


@dataclass(frozen=True)
class SalaryStructureUpdate:
    changes: Mapping[str, float]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SalaryStructureUpdate":
        changes: dict[str, float] = {}
        for key, value in (payload or {}).items():
            if key in DERIVED_SALARY_FIELDS:
                continue
            if key not in SALARY_COMPONENT_FIELDS:
                raise ValidationError(f"Unknown salary field: {key}")
            changes[key] = non_negative_number(value, key)
        return cls(changes=changes)

    def apply(self, salary: SalaryStructure | None) -> SalaryStructure:
        return dataclasses.replace(salary or SalaryStructure(), **dict(self.changes))

"""Validation plan models and the planner protocol.

Validation rules are computed outside schemadoc. A planner describes the rules
it enforces as path-keyed facts, using the same path syntax as the object
mapper (``$``, ``.name``, ``[*]``, ``.~``, ``.*``), and ``generate`` merges
those facts into the property list.
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from schemadoc.typeinfo import TypeDescriptor

_PLAN_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class RulePlan(BaseModel):
    """One validation rule applied to a property."""

    model_config = _PLAN_CONFIG

    description: str = ""
    details: str = ""
    error_code: str = ""
    conditions: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()


class PropertyPlan(BaseModel):
    """Validation facts for the property at ``path``."""

    model_config = _PLAN_CONFIG

    path: str
    type_info: TypeDescriptor | None = None
    is_optional: bool = False
    is_hidden: bool = False
    examples: tuple[str, ...] = ()
    rules: tuple[RulePlan, ...] = ()


class ValidatorPlan(BaseModel):
    """Everything a validator reports about the type it validates."""

    model_config = _PLAN_CONFIG

    name: str = ""
    properties: tuple[PropertyPlan, ...] = Field(default_factory=tuple)


@runtime_checkable
class ValidationPlanner(Protocol):
    """Source of validation facts for a root type."""

    def plan(self, root_type: Any) -> ValidatorPlan:
        """Describe the rules enforced on ``root_type``. May raise any exception."""
        ...


class StaticPlanner:
    """Planner returning a precomputed plan, e.g. one loaded from JSON."""

    def __init__(self, plan: ValidatorPlan) -> None:
        self._plan = plan

    def plan(self, root_type: Any) -> ValidatorPlan:  # noqa: ARG002
        return self._plan

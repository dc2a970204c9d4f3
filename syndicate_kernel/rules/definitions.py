"""
Rule definitions as plain data.

Extra rules can be declared as JSON-compatible dicts, validated, and
turned into Rules that read context attributes by name. A condition on a
field the context does not have is simply false.
"""

from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel

from syndicate_kernel.rules.table import Rule, RuleError

_MISSING = object()

OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    "contains": lambda a, b: str(b).lower() in str(a).lower(),
}


class ConditionDefinition(BaseModel):
    field: str
    operator: str = "=="
    value: Union[bool, int, float, str]


class RuleDefinition(BaseModel):
    """A rule declared as data. All conditions must hold for it to match."""

    id: str
    name: str
    description: str = ""
    priority: int = 0
    conditions: List[ConditionDefinition] = []
    verdict: str


class ValidationReport(BaseModel):
    errors: List[str] = []
    warnings: List[str] = []

    @property
    def ok(self) -> bool:
        return not self.errors


def _has_field(context_type: type, name: str) -> bool:
    fields = getattr(context_type, "model_fields", {})
    return name in fields or hasattr(context_type, name)


def _condition_holds(ctx: Any, cond: ConditionDefinition) -> bool:
    compare = OPERATORS.get(cond.operator)
    actual = getattr(ctx, cond.field, _MISSING)
    if compare is None or actual is _MISSING:
        return False
    try:
        return bool(compare(actual, cond.value))
    except TypeError:
        # Comparing incompatible types (e.g. an int field against a string)
        return False


def build_rule(definition: RuleDefinition, context_type: Optional[type] = None) -> Rule:
    """Turn a definition into a Rule. Raises RuleError for unusable definitions."""
    report = validate_definitions([definition], context_type)
    if not report.ok:
        raise RuleError("; ".join(report.errors))

    conditions = list(definition.conditions)

    def predicate(ctx: Any) -> bool:
        return all(_condition_holds(ctx, c) for c in conditions)

    return Rule(
        id=definition.id,
        name=definition.name,
        priority=definition.priority,
        predicate=predicate,
        verdict=definition.verdict,
        description=definition.description,
    )


def validate_definitions(
    definitions: List[RuleDefinition],
    context_type: Optional[type] = None,
) -> ValidationReport:
    """
    Check a batch of definitions before they are loaded.

    Errors: empty id or name, duplicate ids, empty verdict.
    Warnings: unknown operators (the condition never holds), shared
    priorities (declaration order will decide), fields the context type
    does not expose, definitions with no conditions.
    """
    report = ValidationReport()

    for d in definitions:
        label = d.id or "<no id>"
        if not d.id.strip():
            report.errors.append("Rule has an empty id")
        if not d.name.strip():
            report.errors.append(f"Rule {label} has an empty name")
        if not d.verdict.strip():
            report.errors.append(f"Rule {label} has no verdict")
        if not d.conditions:
            report.warnings.append(f"Rule {label} has no conditions and always matches")
        for cond in d.conditions:
            if cond.operator not in OPERATORS:
                report.warnings.append(
                    f"Rule {label} uses unknown operator '{cond.operator}'"
                )
            if context_type is not None and not _has_field(context_type, cond.field):
                report.warnings.append(
                    f"Rule {label} reads unknown field '{cond.field}'"
                )

    ids = Counter(d.id for d in definitions if d.id)
    for rule_id, count in ids.items():
        if count > 1:
            report.errors.append(f"Duplicate rule id '{rule_id}'")

    priorities = Counter(d.priority for d in definitions)
    for priority, count in sorted(priorities.items(), reverse=True):
        if count > 1:
            report.warnings.append(
                f"{count} rules share priority {priority}; declaration order decides"
            )

    return report


def load_definitions(data: List[dict]) -> List[RuleDefinition]:
    """Parse raw dicts (e.g. from a JSON file) into definitions."""
    return [RuleDefinition.model_validate(item) for item in data]

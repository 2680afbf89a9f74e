"""
Free-text constraint parsing.

Constraints are recognised by a fixed table of keyword rules rather than any
real language understanding. Each rule fires independently, so one sentence
may produce several constraints, but never more than one per type.
"""

import re
import logging
from typing import Callable, List, NamedTuple, Optional

from models.schemas import Constraint, ConstraintType

logger = logging.getLogger(__name__)


class ConstraintRule(NamedTuple):
    type: ConstraintType
    triggers: tuple  # lowercase substrings that must all be present
    extract: Callable[[str], Optional[str]]


NO_AFTER_PATTERN = re.compile(r"no classes after (\d+):?(\d*)(?:\s*(?:pm|PM))?", re.IGNORECASE)
UNAVAILABLE_PATTERN = re.compile(r"(?:professor|instructor)?\s*(\w+)\s+unavailable\s+(\w+)", re.IGNORECASE)


def _extract_no_after(text: str) -> Optional[str]:
    # "PM" is tolerated but not converted to a 24-hour clock
    match = NO_AFTER_PATTERN.search(text)
    if not match:
        return None
    return f"{match.group(1)}:{match.group(2) or '00'}"


def _extract_unavailable(text: str) -> Optional[str]:
    match = UNAVAILABLE_PATTERN.search(text)
    if not match:
        return None
    return f"{match.group(1)}:{match.group(2)}"


def _flag(text: str) -> str:
    return "true"


class ConstraintParser:
    """Turns free text into typed constraint directives."""

    RULES = (
        ConstraintRule(ConstraintType.NO_AFTER, ("no classes after",), _extract_no_after),
        ConstraintRule(ConstraintType.RESPECT_LUNCH, ("lunch",), _flag),
        ConstraintRule(ConstraintType.CONSECUTIVE_LABS, ("lab", "consecutive"), _flag),
        ConstraintRule(ConstraintType.MORNING_PREFERRED, ("morning",), _flag),
        ConstraintRule(ConstraintType.INSTRUCTOR_UNAVAILABLE, ("unavailable",), _extract_unavailable),
    )

    def parse(self, text: Optional[str]) -> List[Constraint]:
        if not text:
            return []

        lowered = text.lower()
        constraints = []
        for rule in self.RULES:
            if not all(trigger in lowered for trigger in rule.triggers):
                continue
            value = rule.extract(text)
            if value is None:
                logger.debug(f"Trigger for {rule.type.value} present but no value could be extracted")
                continue
            constraints.append(Constraint(type=rule.type, value=value))
        return constraints


def parse_constraints(text: Optional[str]) -> List[Constraint]:
    """Parse free-text constraints; unmatched or empty text yields an empty list."""
    return ConstraintParser().parse(text)

from __future__ import annotations

from typing import Callable, Dict, List

from ..models import ExecutionOrder, MethodNameMatcher
from ..naming import lower_words, starts_with_words


STEP_TEXT_TRANSFORMS: Dict[str, Callable[[str], str]] = {
    "identity": lambda text: text,
    "lower": str.lower,
    "upper": str.upper,
    "title": str.title,
    "sentence": lambda text: text[:1].upper() + text[1:].lower(),
}


def get_text_transform(name: str) -> Callable[[str], str]:
    try:
        return STEP_TEXT_TRANSFORMS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(STEP_TEXT_TRANSFORMS))
        raise ValueError(f"Unknown step text case '{name}' (expected one of: {known})") from None


def step_matchers() -> List[MethodNameMatcher]:
    # AndGiven/AndWhen must be tried before the bare And convention
    return [
        MethodNameMatcher.starting_with("Given", execution_order=ExecutionOrder.SETUP_STATE),
        MethodNameMatcher.starting_with("AndGiven", execution_order=ExecutionOrder.CONSECUTIVE_SETUP_STATE),
        MethodNameMatcher.starting_with("When", execution_order=ExecutionOrder.TRANSITION),
        MethodNameMatcher.starting_with("AndWhen", execution_order=ExecutionOrder.CONSECUTIVE_TRANSITION),
        MethodNameMatcher.starting_with("Then", asserts=True, execution_order=ExecutionOrder.ASSERTION),
        MethodNameMatcher.starting_with("And", asserts=True, execution_order=ExecutionOrder.CONSECUTIVE_ASSERTION),
    ]


def _starts_with_any(name: str, *keywords: str) -> bool:
    return any(starts_with_words(name, lower_words(keyword)) for keyword in keywords)


def fixture_matchers() -> List[MethodNameMatcher]:
    """Setup and teardown conventions; matched methods run but are never reported."""
    return [
        MethodNameMatcher.ending_with("Context", execution_order=ExecutionOrder.SETUP_STATE),
        MethodNameMatcher(
            predicate=lambda name: _starts_with_any(name, "Setup", "SetUp"),
            execution_order=ExecutionOrder.SETUP_STATE,
            should_report=False,
        ),
        MethodNameMatcher(
            predicate=lambda name: _starts_with_any(name, "Teardown", "TearDown"),
            execution_order=ExecutionOrder.TEAR_DOWN,
            should_report=False,
        ),
    ]


def default_matchers(include_fixtures: bool = False) -> List[MethodNameMatcher]:
    if not include_fixtures:
        return step_matchers()
    fixtures = fixture_matchers()
    return fixtures[:2] + step_matchers() + fixtures[2:]

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .naming import ends_with_words, lower_words, starts_with_words


class ExecutionOrder(IntEnum):
    INITIALIZE = 1
    SETUP_STATE = 2
    CONSECUTIVE_SETUP_STATE = 3
    TRANSITION = 4
    CONSECUTIVE_TRANSITION = 5
    ASSERTION = 6
    CONSECUTIVE_ASSERTION = 7
    TEAR_DOWN = 8


class MethodNameMatcher(BaseModel):
    """Decides whether a method name belongs to a step category."""

    model_config = ConfigDict(frozen=True)

    predicate: Callable[[str], bool]
    asserts: bool = False
    execution_order: ExecutionOrder = ExecutionOrder.SETUP_STATE
    should_report: bool = True
    keyword: Optional[str] = None  # stripped from name-derived titles

    def is_method_of_interest(self, name: str) -> bool:
        return bool(self.predicate(name))

    @classmethod
    def starting_with(
        cls,
        keyword: str,
        asserts: bool = False,
        execution_order: ExecutionOrder = ExecutionOrder.SETUP_STATE,
        should_report: bool = True,
    ) -> "MethodNameMatcher":
        words = lower_words(keyword)

        def _predicate(name: str) -> bool:
            return starts_with_words(name, words)

        return cls(
            predicate=_predicate,
            asserts=asserts,
            execution_order=execution_order,
            should_report=should_report,
            keyword=keyword,
        )

    @classmethod
    def ending_with(
        cls,
        suffix: str,
        asserts: bool = False,
        execution_order: ExecutionOrder = ExecutionOrder.SETUP_STATE,
        should_report: bool = False,
    ) -> "MethodNameMatcher":
        words = lower_words(suffix)
        return cls(
            predicate=lambda name: ends_with_words(name, words),
            asserts=asserts,
            execution_order=execution_order,
            should_report=should_report,
        )


class StepArgs(BaseModel):
    """One declared argument variant of a step method."""

    model_config = ConfigDict(frozen=True)

    inputs: Tuple[Any, ...] = Field(default_factory=tuple)
    template: Optional[str] = None


class MethodDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    function: Callable[..., Any]
    returns_its_text: bool = False
    arg_variants: Tuple[StepArgs, ...] = Field(default_factory=tuple)


class ExecutionStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    action: Callable[[], Any]
    asserts: bool = False
    execution_order: ExecutionOrder = ExecutionOrder.SETUP_STATE
    should_report: bool = True

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "asserts": self.asserts,
            "execution_order": self.execution_order.name.lower(),
            "should_report": self.should_report,
        }


class ScenarioSymbol(BaseModel):
    name: str
    qualified_name: str
    file_path: str
    step_methods: list[str] = Field(default_factory=list)

    @property
    def target(self) -> str:
        """Importable ``module:Class`` reference accepted by ``bddscan scan``."""
        module, _, cls_name = self.qualified_name.rpartition(".")
        return f"{module}:{cls_name}"

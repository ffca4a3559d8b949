from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence

from ..models import ExecutionStep, MethodDescriptor, MethodNameMatcher, StepArgs
from ..parsing.discovery import describe_methods
from .conventions import default_matchers
from .titles import SelfDescribingInvocation, step_title


logger = logging.getLogger(__name__)


class StepAction:
    """Deferred call of a step method on its scenario instance."""

    def __init__(
        self,
        target: Any,
        method: MethodDescriptor,
        inputs: Sequence[Any] = (),
        invocation: Optional[SelfDescribingInvocation] = None,
    ):
        self.target = target
        self.method = method
        self.inputs = tuple(inputs)
        self.invocation = invocation

    def __call__(self) -> None:
        if self.invocation is not None:
            # The result is a lazy sequence; running the step means draining it.
            self.invocation.drain()
            return
        self.method.function(self.target, *self.inputs)

    def __repr__(self) -> str:
        return f"StepAction({self.method.name}, inputs={self.inputs!r})"


class MethodNameStepScanner:
    """Scans scenario methods for steps using method name conventions.

    Each matcher pairs a name predicate with the step policy (asserts,
    execution order, reported). The first matcher accepting a method name
    decides its category; the remaining matchers are not consulted.

    A method decorated with ``run_step_with_args`` yields one step per
    declared argument variant, otherwise exactly one step. Methods declared
    to return ``Iterable[str]`` provide their own title through the first
    value they yield.
    """

    def __init__(self, step_text_transformer: Callable[[str], str], *matchers: MethodNameMatcher):
        self._step_text_transformer = step_text_transformer
        self._matchers = tuple(matchers)

    @property
    def matchers(self) -> Sequence[MethodNameMatcher]:
        return self._matchers

    def scan(self, test_object: Any, method: MethodDescriptor) -> List[ExecutionStep]:
        for matcher in self._matchers:
            if not matcher.is_method_of_interest(method.name):
                continue

            logger.debug("Method %s matched %s convention", method.name, matcher.keyword or "custom")
            if not method.arg_variants:
                return [self._get_step(test_object, matcher, method)]

            steps: List[ExecutionStep] = []
            for args in method.arg_variants:
                if not args.inputs:
                    logger.debug("Skipping empty argument variant on %s", method.name)
                    continue
                steps.append(self._get_step(test_object, matcher, method, args))
            return steps

        return []

    def _get_step(
        self,
        test_object: Any,
        matcher: MethodNameMatcher,
        method: MethodDescriptor,
        args: Optional[StepArgs] = None,
    ) -> ExecutionStep:
        inputs = tuple(args.inputs) if args is not None else ()
        invocation = None
        if method.returns_its_text:
            invocation = SelfDescribingInvocation(
                method.name, lambda: method.function(test_object, *inputs)
            )

        title = step_title(
            method.name,
            self._step_text_transformer,
            args=args,
            keyword=matcher.keyword,
            invocation=invocation,
        )
        return ExecutionStep(
            title=title,
            action=StepAction(test_object, method, inputs, invocation),
            asserts=matcher.asserts,
            execution_order=matcher.execution_order,
            should_report=matcher.should_report,
        )


def default_scanner(
    step_text_transformer: Optional[Callable[[str], str]] = None,
    include_fixtures: bool = False,
) -> MethodNameStepScanner:
    transform = step_text_transformer or (lambda text: text)
    return MethodNameStepScanner(transform, *default_matchers(include_fixtures=include_fixtures))


def scan_scenario(test_object: Any, scanner: Optional[MethodNameStepScanner] = None) -> List[ExecutionStep]:
    scanner = scanner or default_scanner()
    steps: List[ExecutionStep] = []
    for method in describe_methods(type(test_object)):
        steps.extend(scanner.scan(test_object, method))
    return steps

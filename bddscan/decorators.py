from __future__ import annotations

from typing import Any, Callable, Optional, Tuple, TypeVar

from .models import StepArgs


STEP_ARGS_ATTR = "__bddscan_step_args__"

F = TypeVar("F", bound=Callable[..., Any])


def run_step_with_args(*inputs: Any, template: Optional[str] = None) -> Callable[[F], F]:
    """Declare an argument variant for a step method.

    Stack the decorator to run the same step with several argument sets::

        @run_step_with_args(1, 2, template="adding {0} and {1}")
        @run_step_with_args(3, 4)
        def when_adding(self, a, b):
            ...

    Variants are reported in the order they appear in the source.
    """

    def decorator(func: F) -> F:
        existing: Tuple[StepArgs, ...] = getattr(func, STEP_ARGS_ATTR, ())
        # decorators apply bottom-up, so the newest one goes first
        setattr(func, STEP_ARGS_ATTR, (StepArgs(inputs=inputs, template=template),) + existing)
        return func

    return decorator


def declared_step_args(func: Callable[..., Any]) -> Tuple[StepArgs, ...]:
    return tuple(getattr(func, STEP_ARGS_ATTR, ()))

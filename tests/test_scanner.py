"""Tests for the method name step scanner."""

from __future__ import annotations

from typing import Iterator

import pytest

from bddscan.decorators import run_step_with_args
from bddscan.errors import StepTitleError
from bddscan.models import ExecutionOrder, MethodDescriptor, MethodNameMatcher
from bddscan.parsing.discovery import describe_methods
from bddscan.scanning.scanner import MethodNameStepScanner, default_scanner, scan_scenario


class CartScenario:
    def __init__(self):
        self.calls = []

    def GivenAUserWithBalance(self):
        self.calls.append("given")

    def given_an_opened_cart(self) -> Iterator[str]:
        self.calls.append("opening")
        yield "opened cart"
        self.calls.append("opened")

    def WhenTheUserBuys(self):
        self.calls.append("when")

    @run_step_with_args(42)
    def ThenTheOrderIsComplete(self, number):
        self.calls.append(("then", number))

    @run_step_with_args(19.99, template="the total is {0}")
    @run_step_with_args(5, template="the total is {0}")
    def AndTheTotalIs(self, total):
        self.calls.append(("total", total))

    def helper(self):
        self.calls.append("helper")


class EdgeScenario:
    def __init__(self):
        self.calls = []

    @run_step_with_args()
    @run_step_with_args(1)
    def given_a_number(self, n):
        self.calls.append(n)

    @run_step_with_args(3)
    @run_step_with_args(7)
    def given_a_cart_with_items(self, count) -> Iterator[str]:
        self.calls.append(count)
        yield f"a cart with {count} items"

    def given_nothing_to_say(self) -> Iterator[str]:
        self.calls.append("silent")
        return
        yield

    def given_a_broken_title(self) -> Iterator[str]:
        raise RuntimeError("no title")
        yield "never"

    def given_a_late_failure(self) -> Iterator[str]:
        yield "late failure"
        raise ValueError("after title")

    def given_maybe(self) -> Iterator[str]:
        yield None

    def when_it_fails(self):
        raise ValueError("bad")


def method(cls, name) -> MethodDescriptor:
    return next(m for m in describe_methods(cls) if m.name == name)


@pytest.fixture
def scanner():
    return default_scanner()


class TestScan:
    """Tests for scanning a single method."""

    def test_plain_method_single_step(self, scanner):
        """Test a matched method without variants gives one step."""
        scenario = CartScenario()
        steps = scanner.scan(scenario, method(CartScenario, "GivenAUserWithBalance"))
        assert len(steps) == 1
        step = steps[0]
        assert step.title == "A user with balance"
        assert step.asserts is False
        assert step.execution_order == ExecutionOrder.SETUP_STATE
        assert step.should_report is True

    def test_action_deferred(self, scanner):
        """Test plain steps do not run during the scan."""
        scenario = CartScenario()
        steps = scanner.scan(scenario, method(CartScenario, "GivenAUserWithBalance"))
        assert scenario.calls == []
        steps[0].action()
        assert scenario.calls == ["given"]

    def test_argument_variant(self, scanner):
        """Test an argument variant is appended to the title and passed to the method."""
        scenario = CartScenario()
        steps = scanner.scan(scenario, method(CartScenario, "ThenTheOrderIsComplete"))
        assert [s.title for s in steps] == ["The order is complete 42"]
        assert steps[0].asserts is True
        assert steps[0].execution_order == ExecutionOrder.ASSERTION
        steps[0].action()
        assert scenario.calls == [("then", 42)]

    def test_variants_in_declaration_order(self, scanner):
        """Test one step per variant, in the order they are declared."""
        scenario = CartScenario()
        steps = scanner.scan(scenario, method(CartScenario, "AndTheTotalIs"))
        assert [s.title for s in steps] == ["the total is 19.99", "the total is 5"]
        assert all(s.execution_order == ExecutionOrder.CONSECUTIVE_ASSERTION for s in steps)
        for step in steps:
            step.action()
        assert scenario.calls == [("total", 19.99), ("total", 5)]

    def test_unmatched_method(self, scanner):
        """Test a method matching no convention gives no steps."""
        assert scanner.scan(CartScenario(), method(CartScenario, "helper")) == []

    def test_empty_variant_skipped(self, scanner):
        """Test variants without inputs produce no step."""
        steps = scanner.scan(EdgeScenario(), method(EdgeScenario, "given_a_number"))
        assert [s.title for s in steps] == ["A number 1"]

    def test_first_matching_matcher_wins(self):
        """Test later matchers are not consulted once one matches."""
        consulted = []

        def second(name):
            consulted.append(name)
            return True

        scanner = MethodNameStepScanner(
            lambda text: text,
            MethodNameMatcher.starting_with("Given", execution_order=ExecutionOrder.SETUP_STATE),
            MethodNameMatcher(predicate=second, asserts=True, execution_order=ExecutionOrder.ASSERTION),
        )
        steps = scanner.scan(CartScenario(), method(CartScenario, "GivenAUserWithBalance"))
        assert len(steps) == 1
        assert steps[0].asserts is False
        assert consulted == []

    def test_text_transform(self):
        """Test the scanner applies its text transform to name titles."""
        scanner = default_scanner(str.lower)
        steps = scanner.scan(CartScenario(), method(CartScenario, "GivenAUserWithBalance"))
        assert steps[0].title == "a user with balance"

    def test_execution_fault_propagates(self, scanner):
        """Test faults raised by an action are not wrapped."""
        steps = scanner.scan(EdgeScenario(), method(EdgeScenario, "when_it_fails"))
        with pytest.raises(ValueError, match="bad"):
            steps[0].action()


class TestSelfDescribingSteps:
    """Tests for steps that yield their own title."""

    def test_title_from_yield(self, scanner):
        """Test the first yielded string becomes the title."""
        scenario = CartScenario()
        steps = scanner.scan(scenario, method(CartScenario, "given_an_opened_cart"))
        assert [s.title for s in steps] == ["opened cart"]

    def test_invoked_once(self, scanner):
        """Test the action resumes the invocation made for the title."""
        scenario = CartScenario()
        steps = scanner.scan(scenario, method(CartScenario, "given_an_opened_cart"))
        assert scenario.calls == ["opening"]
        steps[0].action()
        assert scenario.calls == ["opening", "opened"]

    def test_title_with_variants(self, scanner):
        """Test each variant invokes the method with its own arguments."""
        scenario = EdgeScenario()
        steps = scanner.scan(scenario, method(EdgeScenario, "given_a_cart_with_items"))
        assert [s.title for s in steps] == ["a cart with 3 items", "a cart with 7 items"]
        assert scenario.calls == [3, 7]

    def test_empty_sequence_falls_back(self, scanner):
        """Test an empty sequence uses the name-derived title."""
        steps = scanner.scan(EdgeScenario(), method(EdgeScenario, "given_nothing_to_say"))
        assert steps[0].title == "Nothing to say"

    def test_none_title_falls_back(self, scanner):
        """Test a None first value uses the name-derived title."""
        steps = scanner.scan(EdgeScenario(), method(EdgeScenario, "given_maybe"))
        assert steps[0].title == "Maybe"

    def test_title_fault(self, scanner):
        """Test a fault before the title raises StepTitleError."""
        with pytest.raises(StepTitleError, match="given_a_broken_title") as excinfo:
            scanner.scan(EdgeScenario(), method(EdgeScenario, "given_a_broken_title"))
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_fault_after_title_raised_by_action(self, scanner):
        """Test faults after the title surface unchanged when the step runs."""
        steps = scanner.scan(EdgeScenario(), method(EdgeScenario, "given_a_late_failure"))
        assert steps[0].title == "late failure"
        with pytest.raises(ValueError, match="after title"):
            steps[0].action()


class TestScanScenario:
    """Tests for scanning a whole scenario instance."""

    def test_all_steps_in_definition_order(self):
        """Test every conventional method is scanned in definition order."""
        scenario = CartScenario()
        steps = scan_scenario(scenario)
        assert [s.title for s in steps] == [
            "A user with balance",
            "opened cart",
            "The user buys",
            "The order is complete 42",
            "the total is 19.99",
            "the total is 5",
        ]

    def test_no_plain_step_runs(self):
        """Test scanning runs only the self-describing step."""
        scenario = CartScenario()
        scan_scenario(scenario)
        assert scenario.calls == ["opening"]

    def test_title_fault_aborts(self):
        """Test a title fault stops the scenario scan."""
        with pytest.raises(StepTitleError):
            scan_scenario(EdgeScenario())

"""
Test Case Registry

Named scenarios, each producing a RequestSpec and a list of expectations.
Cases run in isolation and in registration order: a transport failure in
one case, or any exception raised while building or evaluating it, is
recorded as an ERRORED result and never aborts the run.

Lifecycle of each case within a run:

    PENDING → RUNNING → PASSED | FAILED | ERRORED

Cases never started because the run was cancelled end as CANCELLED.
Every selected case yields exactly one TestResult, reported in
registration order even when cases execute concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from .assertions import evaluate
from .capture import AsyncResponseCapturer, ResponseCapturer
from .config import HTTP_TIMEOUT_MS
from .errors import INTERNAL_ERROR, ConfigurationError, DuplicateCaseError, HarnessFailure
from .expectations import Expectation
from .models import CaseState, RequestSpec, TestResult

logger = logging.getLogger(__name__)

SpecFactory = Callable[[], RequestSpec]
ExpectationsFactory = Callable[[], Sequence[Expectation]]


@dataclass(frozen=True)
class TestCase:
    """A registered scenario. Factories are called once per run of the case."""

    __test__ = False  # not a pytest test class

    name: str
    spec_factory: SpecFactory
    expectations_factory: ExpectationsFactory
    description: str = ""


class CaseRegistry:
    """Ordered collection of test cases and the runner that executes them."""

    def __init__(self, timeout_ms: float = HTTP_TIMEOUT_MS) -> None:
        self.timeout_ms = timeout_ms
        self._cases: dict[str, TestCase] = {}
        self._states: dict[str, CaseState] = {}

    def register(
        self,
        name: str,
        spec_factory: SpecFactory,
        expectations_factory: ExpectationsFactory,
        description: str = "",
    ) -> TestCase:
        """Register a case. Names are unique; registration order is run order."""
        if name in self._cases:
            raise DuplicateCaseError(f"Test case already registered: {name!r}")
        case = TestCase(name, spec_factory, expectations_factory, description)
        self._cases[name] = case
        self._states[name] = CaseState.PENDING
        return case

    @property
    def cases(self) -> list[TestCase]:
        return list(self._cases.values())

    def state_of(self, name: str) -> CaseState:
        return self._states[name]

    def _select(self, only: Iterable[str] | None) -> list[TestCase]:
        if only is None:
            return self.cases
        wanted = set(only)
        unknown = sorted(wanted - self._cases.keys())
        if unknown:
            raise ConfigurationError(f"Unknown test case(s): {', '.join(unknown)}")
        return [case for case in self._cases.values() if case.name in wanted]

    # -------------------------------------------------------------------------
    # Single case
    # -------------------------------------------------------------------------

    def _transition(self, name: str, state: CaseState) -> None:
        current = self._states.get(name)
        if current is not None and current.is_terminal:
            raise RuntimeError(f"Case {name!r} is already {current.value}")
        self._states[name] = state
        logger.debug("Case %s -> %s", name, state.value)

    def _finish(self, result: TestResult) -> TestResult:
        self._transition(result.name, result.state)
        if result.state is CaseState.PASSED:
            logger.info("PASS %s", result.name)
        else:
            logger.info(
                "%s %s: %s",
                result.state.value.upper(),
                result.name,
                "; ".join(result.failures),
            )
        return result

    @staticmethod
    def _errored(case: TestCase, error: Exception) -> TestResult:
        if isinstance(error, HarnessFailure):
            category, detail = error.failure_category, str(error)
        else:
            category, detail = INTERNAL_ERROR, f"{type(error).__name__}: {error}"
        return TestResult(
            name=case.name,
            state=CaseState.ERRORED,
            failures=[f"{category}: {detail}"],
            error_category=category,
        )

    @staticmethod
    def _cancelled(case: TestCase) -> TestResult:
        return TestResult(
            name=case.name,
            state=CaseState.CANCELLED,
            failures=["not run: run cancelled"],
        )

    def _run_case(self, case: TestCase, capturer: ResponseCapturer) -> TestResult:
        self._transition(case.name, CaseState.RUNNING)
        try:
            spec = case.spec_factory()
            expectations = list(case.expectations_factory())
            response = capturer.execute(spec)
            result = evaluate(case.name, response, expectations)
        except HarnessFailure as e:
            result = self._errored(case, e)
        except Exception as e:
            logger.exception("Case %s raised an unexpected error", case.name)
            result = self._errored(case, e)
        return self._finish(result)

    async def _run_case_async(
        self, case: TestCase, capturer: AsyncResponseCapturer
    ) -> TestResult:
        self._transition(case.name, CaseState.RUNNING)
        try:
            spec = case.spec_factory()
            expectations = list(case.expectations_factory())
            response = await capturer.execute(spec)
            result = evaluate(case.name, response, expectations)
        except HarnessFailure as e:
            result = self._errored(case, e)
        except Exception as e:
            logger.exception("Case %s raised an unexpected error", case.name)
            result = self._errored(case, e)
        return self._finish(result)

    # -------------------------------------------------------------------------
    # Runs
    # -------------------------------------------------------------------------

    def _reset(self, cases: list[TestCase]) -> None:
        for case in cases:
            self._states[case.name] = CaseState.PENDING

    def run_all(
        self,
        *,
        capturer: ResponseCapturer | None = None,
        cancel: threading.Event | None = None,
        only: Iterable[str] | None = None,
    ) -> list[TestResult]:
        """
        Run cases one at a time in registration order.

        The cancel event is checked between cases; an in-flight request is
        left to finish or time out.
        """
        cases = self._select(only)
        self._reset(cases)
        owns_capturer = capturer is None
        capturer = capturer or ResponseCapturer(timeout_ms=self.timeout_ms)

        logger.info("Running %d case(s) sequentially", len(cases))
        results: list[TestResult] = []
        try:
            for case in cases:
                if cancel is not None and cancel.is_set():
                    results.append(self._finish(self._cancelled(case)))
                    continue
                results.append(self._run_case(case, capturer))
        finally:
            if owns_capturer:
                capturer.close()
        return results

    async def run_all_async(
        self,
        *,
        concurrency: int = 4,
        capturer: AsyncResponseCapturer | None = None,
        cancel: threading.Event | None = None,
        only: Iterable[str] | None = None,
    ) -> list[TestResult]:
        """
        Run cases concurrently with at most `concurrency` in flight.

        Results are returned in registration order regardless of the
        order in which cases complete.
        """
        if concurrency < 1:
            raise ConfigurationError(f"concurrency must be >= 1, got {concurrency}")

        cases = self._select(only)
        self._reset(cases)
        owns_capturer = capturer is None
        capturer = capturer or AsyncResponseCapturer(timeout_ms=self.timeout_ms)
        semaphore = asyncio.Semaphore(concurrency)

        async def run(case: TestCase) -> TestResult:
            async with semaphore:
                if cancel is not None and cancel.is_set():
                    return self._finish(self._cancelled(case))
                return await self._run_case_async(case, capturer)

        logger.info("Running %d case(s) with concurrency %d", len(cases), concurrency)
        try:
            results = await asyncio.gather(*(run(case) for case in cases))
        finally:
            if owns_capturer:
                await capturer.close()

        order = {case.name: index for index, case in enumerate(cases)}
        return sorted(results, key=lambda result: order[result.name])

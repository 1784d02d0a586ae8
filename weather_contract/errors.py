"""
Harness Failure Types

Canonical failure taxonomy for the contract harness.

Only conditions that stop a single test case are exceptions. Body parse
errors and expectation mismatches are recorded as data on the captured
response and the test result.
"""

from __future__ import annotations

# Category recorded for a case that raised something outside this taxonomy
INTERNAL_ERROR = "internal_error"


class HarnessFailure(Exception):
    """Base class for all harness failures."""

    failure_category: str = "unknown"

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class NetworkError(HarnessFailure):
    """
    The transport could not complete the request.

    - Fatality: Fatal to the current test case only (recorded as ERRORED).
    - The registry run continues with the next case.
    """

    failure_category = "network_error"

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.url = url


class RequestTimeoutError(NetworkError):
    """The configured deadline elapsed before a response arrived."""

    failure_category = "timeout_error"


class InvalidRequestSpec(HarnessFailure):
    """A RequestSpec was built from an empty URL/path or an unsupported param value."""

    failure_category = "invalid_request_spec"


class ConfigurationError(HarnessFailure):
    """
    The harness is misconfigured (e.g. no API key).

    Raised from request factories, so it surfaces per case rather than
    aborting the run.
    """

    failure_category = "configuration_error"


class DuplicateCaseError(HarnessFailure):
    """A test case name was registered twice."""

    failure_category = "duplicate_case"

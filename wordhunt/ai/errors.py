"""Failure taxonomy for model invocation."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass


class FailureKind(str, enum.Enum):
    not_found = "not_found"
    auth = "auth"
    rate_limit = "rate_limit"
    other = "other"


class ModelInvocationError(RuntimeError):
    """A single model attempt failed; the policy moves on to the next candidate."""

    kind: FailureKind = FailureKind.other


class ProviderUnavailable(ModelInvocationError):
    """Unknown model, rejected credentials or exhausted quota."""

    def __init__(self, message: str, kind: FailureKind = FailureKind.other) -> None:
        super().__init__(message)
        self.kind = kind


class EmptyResponse(ModelInvocationError):
    """The model answered with no usable output."""


class ContractViolation(ModelInvocationError):
    """The output was well-formed but rejected by an acceptance check."""


@dataclass
class Attempt:
    """Outcome of one candidate attempt, kept for diagnostics."""

    candidate: str
    ok: bool
    elapsed: float
    kind: FailureKind | None = None
    error: str | None = None


class AllCandidatesExhausted(RuntimeError):
    """Every candidate model failed for a single request."""

    def __init__(
        self,
        purpose: str,
        candidates: Sequence[str],
        attempts: Sequence[Attempt],
        last_error: str | None,
    ) -> None:
        self.purpose = purpose
        self.candidates = list(candidates)
        self.attempts = list(attempts)
        self.last_error = last_error
        tried = ", ".join(self.candidates)
        super().__init__(
            f"AI {purpose} failed, tried models: [{tried}]. "
            f"Last error: {last_error or 'no response'}"
        )


class HintGenerationExhausted(AllCandidatesExhausted):
    pass


class WordGenerationExhausted(AllCandidatesExhausted):
    pass


class VisualHintGenerationExhausted(AllCandidatesExhausted):
    pass

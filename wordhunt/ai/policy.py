"""Ordered model fallback with per-attempt timeouts.

Candidates are tried strictly one after another. Any failure (unknown model,
bad credentials, rate limiting, timeout, empty or rejected output, anything
else) moves on to the next candidate; failures are classified only so they
can be logged distinctly. A timed-out attempt is cancelled, not left running.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel

from wordhunt.ai.errors import (
    AllCandidatesExhausted,
    Attempt,
    EmptyResponse,
    FailureKind,
    ModelInvocationError,
)
from wordhunt.ai.provider import GenerationParams, StructuredGenerator
from wordhunt.ai.schemas import parse_output

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_NOT_FOUND_RE = re.compile(r"not found|NOT_FOUND", re.IGNORECASE)
_AUTH_RE = re.compile(
    r"401|unauthorized|incorrect api key|invalid api key|authentication", re.IGNORECASE
)
_RATE_LIMIT_RE = re.compile(r"429|rate limit|quota", re.IGNORECASE)

_STATUS_KINDS = {
    404: FailureKind.not_found,
    401: FailureKind.auth,
    403: FailureKind.auth,
    429: FailureKind.rate_limit,
}

_FAILURE_LOG = {
    FailureKind.not_found: "[%s] model %r not found: %s, trying next",
    FailureKind.auth: "[%s] model %r rejected credentials: %s, trying next",
    FailureKind.rate_limit: "[%s] model %r rate limited: %s, trying next",
    FailureKind.other: "[%s] model %r error: %s, trying next",
}


def classify_failure(exc: BaseException) -> FailureKind:
    """Classify an attempt failure by its type, HTTP status, or message text."""
    if isinstance(exc, ModelInvocationError):
        return exc.kind
    status = getattr(exc, "status_code", None)
    if status in _STATUS_KINDS:
        return _STATUS_KINDS[status]
    message = str(exc)
    if _NOT_FOUND_RE.search(message):
        return FailureKind.not_found
    if _AUTH_RE.search(message):
        return FailureKind.auth
    if _RATE_LIMIT_RE.search(message):
        return FailureKind.rate_limit
    return FailureKind.other


def model_candidates(
    explicit: str | None, configured: Iterable[str], defaults: Iterable[str]
) -> list[str]:
    """Build the ordered candidate list: explicit override, configured list, defaults.

    Blank entries are dropped and repeats keep their first position.
    """
    ordered: list[str] = []
    for candidate in [explicit or "", *configured, *defaults]:
        candidate = candidate.strip()
        if candidate and candidate not in ordered:
            ordered.append(candidate)
    return ordered


@dataclass
class Invocation(Generic[T]):
    output: T
    candidate: str
    attempts: list[Attempt] = field(default_factory=list)


class ModelInvocationPolicy:
    """Try candidate models in order until one returns acceptable output."""

    def __init__(
        self,
        generator: StructuredGenerator,
        *,
        timeout: float,
        params: GenerationParams | None = None,
    ) -> None:
        self._generator = generator
        self._timeout = timeout
        self._params = params

    async def invoke(
        self,
        *,
        purpose: str,
        candidates: Sequence[str],
        system: str,
        prompt: str,
        response_model: type[T],
        text_field: str | None = None,
        accept: Callable[[T], None] | None = None,
        exhausted: type[AllCandidatesExhausted] = AllCandidatesExhausted,
    ) -> Invocation[T]:
        """Run the prompt against each candidate until one succeeds.

        Args:
            purpose: Short label used in logs and the exhaustion message.
            candidates: Model identifiers, tried in order.
            system: System prompt.
            prompt: User prompt.
            response_model: Expected output schema.
            text_field: Field that receives raw, non-JSON text output, if any.
            accept: Optional check on parsed output; raising ContractViolation
                rejects the output and moves on to the next candidate.
            exhausted: Exception type raised when every candidate fails.

        Returns:
            The accepted output, the candidate that produced it, and the
            attempt history.

        Raises:
            AllCandidatesExhausted: (or the given subclass) if no candidate succeeded.
        """
        attempts: list[Attempt] = []
        last_error: str | None = None

        for candidate in candidates:
            logger.debug("[%s] trying model candidate %r", purpose, candidate)
            started = time.monotonic()
            try:
                raw = await asyncio.wait_for(
                    self._generator.generate_structured(
                        model=candidate,
                        system=system,
                        prompt=prompt,
                        response_model=response_model,
                        params=self._params,
                    ),
                    timeout=self._timeout,
                )
                output = parse_output(raw, response_model, text_field=text_field)
                if output is None:
                    raise EmptyResponse("AI returned no output.")
                if accept is not None:
                    accept(output)
            except TimeoutError:
                kind = FailureKind.other
                last_error = f"Model request timed out after {self._timeout:g} seconds"
                logger.warning("[%s] model %r timed out, trying next", purpose, candidate)
            except Exception as exc:
                kind = classify_failure(exc)
                last_error = str(exc) or type(exc).__name__
                logger.warning(_FAILURE_LOG[kind], purpose, candidate, last_error)
            else:
                elapsed = time.monotonic() - started
                attempts.append(Attempt(candidate=candidate, ok=True, elapsed=elapsed))
                logger.debug("[%s] model %r worked in %.2fs", purpose, candidate, elapsed)
                return Invocation(output=output, candidate=candidate, attempts=attempts)

            attempts.append(
                Attempt(
                    candidate=candidate,
                    ok=False,
                    elapsed=time.monotonic() - started,
                    kind=kind,
                    error=last_error,
                )
            )

        error = exhausted(purpose, candidates, attempts, last_error)
        logger.error("%s", error)
        raise error

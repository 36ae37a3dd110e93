"""High-level async AI functions for the game.

Each function builds its prompt, runs it through the model fallback policy
and returns a validated result. Responses are Pydantic models via instructor
(see wordhunt/ai/schemas.py); hints are additionally repaired against the
masking rules in wordhunt/hints.py before they reach the caller.

Every function takes optional ``config`` and ``generator`` arguments. When
omitted, the process-wide configuration and provider are used.
"""

from __future__ import annotations

import logging

from wordhunt.ai.errors import (
    ContractViolation,
    HintGenerationExhausted,
    VisualHintGenerationExhausted,
    WordGenerationExhausted,
)
from wordhunt.ai.policy import ModelInvocationPolicy, model_candidates
from wordhunt.ai.provider import AIConfig, StructuredGenerator, get_ai_config, get_provider
from wordhunt.ai.schemas import HintCandidate, ImageDescriptionResponse, WordResponse
from wordhunt.hints import HintRequest, HintResult, build_hint_prompt, compute_expected_mask
from wordhunt.letters import normalize_letters
from wordhunt.words import (
    WordRequest,
    WordResult,
    build_image_description_prompt,
    build_word_prompt,
    is_excluded,
)

logger = logging.getLogger(__name__)


async def generate_hint(
    request: HintRequest,
    *,
    config: AIConfig | None = None,
    generator: StructuredGenerator | None = None,
) -> HintResult:
    """Generate a hint revealing request.reveal_count distinct letters.

    Args:
        request: Validated hint request.
        config: AI configuration (optional).
        generator: Structured generator to call (optional).

    Returns:
        A HintResult that has passed the repair pass.

    Raises:
        HintGenerationExhausted: If every candidate model failed.
    """
    config = config or get_ai_config()
    generator = generator or get_provider()
    system, prompt = build_hint_prompt(request)

    def _accept(candidate: HintCandidate) -> None:
        if config.hint_length_policy != "regenerate":
            return
        # Chosen letters rebuild the hint from the word, so the length is moot.
        if normalize_letters(candidate.chosen_letters):
            return
        if len(candidate.hint) != request.word_length:
            raise ContractViolation(
                f"hint length {len(candidate.hint)} does not match word length "
                f"{request.word_length}"
            )

    policy = ModelInvocationPolicy(
        generator, timeout=config.hint_timeout, params=config.generation
    )
    invocation = await policy.invoke(
        purpose="hint generation",
        candidates=model_candidates(
            config.hint_model, config.hint_candidates, config.default_candidates
        ),
        system=system,
        prompt=prompt,
        response_model=HintCandidate,
        text_field="hint",
        accept=_accept,
        exhausted=HintGenerationExhausted,
    )

    result, diagnostics = compute_expected_mask(request, invocation.output)
    if diagnostics.repaired:
        logger.info(
            "Repaired hint from %r (%s): %r",
            invocation.candidate,
            ", ".join(diagnostics.repairs),
            result.hint,
        )
    return result


async def generate_word(
    request: WordRequest,
    *,
    config: AIConfig | None = None,
    generator: StructuredGenerator | None = None,
) -> WordResult:
    """Generate a word and its definition for the requested difficulty and theme.

    Raises:
        WordGenerationExhausted: If every candidate model failed.
    """
    config = config or get_ai_config()
    generator = generator or get_provider()
    system, prompt = build_word_prompt(request)

    policy = ModelInvocationPolicy(
        generator, timeout=config.word_timeout, params=config.generation
    )
    invocation = await policy.invoke(
        purpose="word generation",
        candidates=model_candidates(
            config.word_model, config.word_candidates, config.default_candidates
        ),
        system=system,
        prompt=prompt,
        response_model=WordResponse,
        exhausted=WordGenerationExhausted,
    )

    response = invocation.output
    if is_excluded(response.word, request):
        logger.warning(
            "Model %r returned already-seen word %r", invocation.candidate, response.word
        )
    return WordResult(word=response.word, definition=response.definition)


async def generate_image_description(
    word: str,
    *,
    config: AIConfig | None = None,
    generator: StructuredGenerator | None = None,
) -> str:
    """Describe word visually, for a picture hint, without naming it.

    A description that contains the word is rejected and the next candidate
    model is tried.

    Raises:
        VisualHintGenerationExhausted: If every candidate model failed.
    """
    config = config or get_ai_config()
    generator = generator or get_provider()
    word = word.strip()
    system, prompt = build_image_description_prompt(word)

    def _accept(response: ImageDescriptionResponse) -> None:
        if word.lower() in response.description.lower():
            raise ContractViolation(f"description gives away the word {word!r}")

    policy = ModelInvocationPolicy(
        generator, timeout=config.word_timeout, params=config.generation
    )
    invocation = await policy.invoke(
        purpose="visual hint generation",
        candidates=model_candidates(
            config.word_model, config.word_candidates, config.default_candidates
        ),
        system=system,
        prompt=prompt,
        response_model=ImageDescriptionResponse,
        text_field="description",
        accept=_accept,
        exhausted=VisualHintGenerationExhausted,
    )
    return invocation.output.description

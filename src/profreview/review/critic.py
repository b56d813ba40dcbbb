"""Critique generation: prompt construction, model call and validation."""

import logging

from profreview.review.generators import TextGenerator
from profreview.review.models import CritiqueResult
from profreview.review.prompt import build_critique_prompt
from profreview.review.schema import critique_json_schema, validate_critique

logger = logging.getLogger(__name__)


class CritiqueGenerator:
    """Produces a validated critique for a piece of (already truncated) code.

    Each call is independent: no conversation memory is kept between calls.
    """

    def __init__(self, generator: TextGenerator) -> None:
        """Initialize the critique generator.

        Args:
            generator: Capability used for the model call.
        """
        self.generator = generator
        self._target_schema = critique_json_schema()

    def generate(self, code: str) -> CritiqueResult:
        """Generate and validate a critique.

        Args:
            code: Truncated code to critique.

        Returns:
            A critique that passed schema validation.

        Raises:
            GenerationUnavailable: If the model call fails.
            SchemaViolation: If the returned value does not conform.
        """
        prompt = build_critique_prompt(code)
        logger.debug(f"Requesting critique ({len(code)} chars of code)")
        raw = self.generator.generate(prompt, self._target_schema)
        critique = validate_critique(raw)
        logger.debug(f"Critique '{critique.title}' with {len(critique.questions)} questions")
        return critique

    __call__ = generate

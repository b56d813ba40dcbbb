"""Text generation capabilities used by the critique generator."""

import json
import logging
from typing import Any, Protocol, runtime_checkable

import dspy  # type: ignore[import-untyped]
import litellm
from dspy.utils.exceptions import AdapterParseError  # type: ignore[import-untyped]

from profreview.errors import GenerationUnavailable, SchemaViolation
from profreview.llm import PROVIDER_ERRORS
from profreview.review.schema import parse_json_payload

logger = logging.getLogger(__name__)


@runtime_checkable
class TextGenerator(Protocol):
    """A capability that turns a prompt into a value shaped by a JSON schema."""

    def generate(self, prompt: str, target_schema: dict[str, Any]) -> Any:
        """Generate a value for ``prompt`` constrained to ``target_schema``.

        Raises:
            GenerationUnavailable: If the underlying model call fails.
        """
        ...


class StructuredGenerationSignature(dspy.Signature):
    """Follow the instruction prompt and answer with a single JSON object.

    The JSON object must validate against the given JSON schema.
    Output the JSON object only. No markdown, no commentary.
    """

    prompt: str = dspy.InputField(desc="Instruction prompt including the code to review")
    target_schema: str = dspy.InputField(desc="JSON schema the answer must conform to")

    critique_json: str = dspy.OutputField(
        desc="A single JSON object conforming to target_schema"
    )


class DSPyGenerator:
    """Generate structured output through the configured DSPy language model."""

    def __init__(self, lm: Any | None = None) -> None:
        """Initialize the generator.

        Args:
            lm: DSPy LM to use. Falls back to the globally configured LM.
        """
        self._lm = lm
        self._predictor = dspy.Predict(StructuredGenerationSignature)

    def generate(self, prompt: str, target_schema: dict[str, Any]) -> Any:
        """Run the prompt and return the parsed JSON answer."""
        schema_text = json.dumps(target_schema, ensure_ascii=False)
        try:
            if self._lm is not None:
                with dspy.context(lm=self._lm):
                    result = self._predictor(prompt=prompt, target_schema=schema_text)
            else:
                result = self._predictor(prompt=prompt, target_schema=schema_text)
        except PROVIDER_ERRORS as e:
            logger.error(f"Model call failed: {e}")
            raise GenerationUnavailable(f"Model call failed: {e}") from e
        except AdapterParseError as e:
            logger.error(f"Could not parse model output: {e}")
            raise SchemaViolation("Model output could not be parsed", [str(e)]) from e

        critique_json = getattr(result, "critique_json", "")
        if isinstance(critique_json, (dict, list)):
            return critique_json
        return parse_json_payload(str(critique_json))


class LiteLLMGenerator:
    """Generate structured output with the provider's native JSON schema mode."""

    def __init__(self, model: str, temperature: float | None = None) -> None:
        self.model = model
        self.temperature = temperature

    def generate(self, prompt: str, target_schema: dict[str, Any]) -> Any:
        """Run the prompt with ``target_schema`` as the response format."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": "critique", "schema": target_schema},
            },
        }
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature

        try:
            response = litellm.completion(**kwargs)
        except PROVIDER_ERRORS as e:
            logger.error(f"Model call to {self.model} failed: {e}")
            raise GenerationUnavailable(f"Model call to {self.model} failed: {e}") from e

        content = response.choices[0].message.content or ""
        return parse_json_payload(content)


class StaticGenerator:
    """Return a fixed value for every prompt (tests and dry runs)."""

    def __init__(self, value: Any) -> None:
        self.value = value
        self.prompts: list[str] = []

    def generate(self, prompt: str, target_schema: dict[str, Any]) -> Any:
        self.prompts.append(prompt)
        return self.value

"""DSPy and LiteLLM configuration utilities."""

import logging
import os

import dspy  # type: ignore[import-untyped]
import litellm

from profreview.config import Settings

logger = logging.getLogger(__name__)

# Every fault litellm raises for a provider call, plus raw socket faults
PROVIDER_ERRORS: tuple[type[Exception], ...] = (
    *litellm.LITELLM_EXCEPTION_TYPES,
    ConnectionError,
    TimeoutError,
)


def configure_dspy(settings: Settings) -> None:
    """Configure DSPy with the LLM backend.

    Args:
        settings: Application settings containing model and API key configuration.
    """
    model = settings.effective_model

    # Configure LiteLLM environment if needed
    if settings.openai_api_key:
        litellm.openai_key = settings.openai_api_key
    if settings.anthropic_api_key:
        litellm.anthropic_key = settings.anthropic_api_key
    if settings.gemini_api_key:
        os.environ.setdefault("GEMINI_API_KEY", settings.gemini_api_key)

    lm = dspy.LM(model=model, temperature=settings.effective_temperature)
    dspy.configure(lm=lm)

    logger.info(f"Configured DSPy with model: {model}")


def verify_model_access(settings: Settings) -> tuple[bool, str]:
    """Verify that the model is accessible.

    Args:
        settings: Application settings containing model configuration.

    Returns:
        Tuple of (success, message)
    """
    model = settings.effective_model
    try:
        # Make a minimal test call
        litellm.completion(
            model=model,
            messages=[{"role": "user", "content": "Hi"}],
            max_tokens=5,
        )
        return True, "Model access verified"
    except litellm.AuthenticationError as e:
        return False, f"Authentication failed: {e}"
    except litellm.RateLimitError as e:
        return False, f"Rate limit exceeded: {e}"
    except litellm.APIConnectionError as e:
        return False, f"Connection error: {e}"
    except Exception as e:
        return False, f"Model access error: {e}"

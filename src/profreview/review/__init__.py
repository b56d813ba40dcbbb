"""Review pipeline - truncation, critique generation and formatting."""

from profreview.review.critic import CritiqueGenerator
from profreview.review.formatter import format_review, render_markdown
from profreview.review.generators import (
    DSPyGenerator,
    LiteLLMGenerator,
    StaticGenerator,
    TextGenerator,
)
from profreview.review.models import CodeSubmission, CritiqueResult, FormattedReview, Question
from profreview.review.pipeline import PipelineRun, PipelineStage, ReviewPipeline
from profreview.review.schema import migrate_legacy_critique, normalize_quick_wins, validate_critique
from profreview.review.truncator import TRUNCATION_MARKER, truncate_code

__all__ = [
    "CodeSubmission",
    "CritiqueGenerator",
    "CritiqueResult",
    "DSPyGenerator",
    "FormattedReview",
    "LiteLLMGenerator",
    "PipelineRun",
    "PipelineStage",
    "Question",
    "ReviewPipeline",
    "StaticGenerator",
    "TRUNCATION_MARKER",
    "TextGenerator",
    "format_review",
    "migrate_legacy_critique",
    "normalize_quick_wins",
    "render_markdown",
    "truncate_code",
    "validate_critique",
]

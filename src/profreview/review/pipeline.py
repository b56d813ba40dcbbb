"""Review pipeline: truncate, generate, format."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, cast

from profreview.config import DEFAULT_TRUNCATION_MARKER, Settings, get_settings
from profreview.errors import ProfReviewError
from profreview.review.critic import CritiqueGenerator
from profreview.review.formatter import format_review
from profreview.review.generators import TextGenerator
from profreview.review.models import CodeSubmission, CritiqueResult, FormattedReview
from profreview.review.truncator import truncate_code

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    """Stage reached by a pipeline run."""

    PENDING = "pending"
    TRUNCATED = "truncated"
    GENERATED = "generated"
    FORMATTED = "formatted"
    FAILED = "failed"


@dataclass
class PipelineRun:
    """State of a single pipeline run, passed from stage to stage."""

    code: str
    stage: PipelineStage = PipelineStage.PENDING
    truncated: str | None = None
    critique: CritiqueResult | None = None
    review: FormattedReview | None = None
    error: ProfReviewError | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the run reached its final stage."""
        return self.stage == PipelineStage.FORMATTED


class ReviewPipeline:
    """Orchestrates truncation, critique generation and formatting.

    Stages run strictly in sequence. The first failure aborts the run and
    the original error is surfaced unchanged; nothing is retried. The
    pipeline keeps no per-run state, so one instance can serve concurrent
    submissions.
    """

    def __init__(
        self,
        generator: TextGenerator,
        max_chars: int = 8000,
        marker: str = DEFAULT_TRUNCATION_MARKER,
        formatter: Callable[[CritiqueResult], FormattedReview] = format_review,
    ) -> None:
        """Initialize the review pipeline.

        Args:
            generator: Capability used to generate critiques.
            max_chars: Truncation limit for submitted code.
            marker: Omission marker appended to truncated code.
            formatter: Renders a critique into a FormattedReview.
        """
        if max_chars < 1:
            raise ValueError(f"max_chars must be positive, got {max_chars}")
        self.critic = CritiqueGenerator(generator)
        self.max_chars = max_chars
        self.marker = marker
        self.formatter = formatter

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, generator: TextGenerator | None = None
    ) -> "ReviewPipeline":
        """Build a pipeline from settings, configuring DSPy when no generator is given."""
        settings = settings or get_settings()
        if generator is None:
            from profreview.llm import configure_dspy
            from profreview.review.generators import DSPyGenerator

            configure_dspy(settings)
            generator = DSPyGenerator()
        return cls(
            generator,
            max_chars=settings.effective_max_chars,
            marker=settings.effective_truncation_marker,
        )

    def execute(self, code: str) -> PipelineRun:
        """Run the pipeline and return the run record without raising.

        A failed run ends in ``PipelineStage.FAILED`` with ``error`` set.
        """
        run = PipelineRun(code=code)
        try:
            run.truncated = truncate_code(code, self.max_chars, self.marker)
            run.stage = PipelineStage.TRUNCATED
            logger.debug(f"Truncated submission: {len(code)} -> {len(run.truncated)} chars")

            run.critique = self.critic.generate(run.truncated)
            run.stage = PipelineStage.GENERATED

            run.review = self.formatter(run.critique)
            run.stage = PipelineStage.FORMATTED
        except ProfReviewError as e:
            logger.error(f"Review failed after stage {run.stage.value}: {e}")
            run.error = e
            run.stage = PipelineStage.FAILED
        return run

    def run(self, code: str) -> FormattedReview:
        """Run the complete pipeline on submitted code.

        Raises:
            GenerationUnavailable: If the model call fails.
            SchemaViolation: If the generated critique does not conform.
        """
        run = self.execute(code)
        if run.error is not None:
            raise run.error
        return cast(FormattedReview, run.review)

    def run_submission(self, submission: CodeSubmission) -> FormattedReview:
        """Run the pipeline on a CodeSubmission."""
        return self.run(submission.code)

    __call__ = run

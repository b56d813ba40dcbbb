"""Base reporter interface for review output."""

from abc import ABC, abstractmethod

from profreview.review.models import FormattedReview


class BaseReporter(ABC):
    """Abstract base class for review reporters."""

    @abstractmethod
    def report(self, review: FormattedReview) -> None:
        """Output the review.

        Args:
            review: The formatted review to report.
        """
        pass

"""Stdout reporter for console output."""

import json

from rich.console import Console
from rich.markdown import Markdown

from profreview.config import OutputFormat
from profreview.review.models import FormattedReview
from profreview.reporters.base import BaseReporter


class StdoutReporter(BaseReporter):
    """Reporter that outputs reviews to stdout."""

    def __init__(
        self,
        format: OutputFormat = "markdown",
        console: Console | None = None,
        render: bool = False,
    ) -> None:
        """Initialize stdout reporter.

        Args:
            format: Output format (markdown or json).
            console: Rich console for output. Creates new one if not provided.
            render: Render markdown with rich instead of printing it raw.
        """
        self.format = format
        self.console = console or Console()
        self.render = render

    def report(self, review: FormattedReview) -> None:
        """Output a review to the console.

        Args:
            review: The review to output.
        """
        if self.format == "json":
            self.console.print_json(json.dumps(review.to_json_dict(), ensure_ascii=False))
        elif self.render:
            self.console.print(Markdown(review.to_markdown()))
        else:
            self.console.print(review.to_markdown(), markup=False, highlight=False)

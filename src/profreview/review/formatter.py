"""Rendering of critiques into markdown."""

from profreview.review.models import CritiqueResult, FormattedReview, Question

PREAMBLE = "素人質問で恐縮ですが..."
QUESTIONS_HEADING = "## 質問リスト"
QUICK_WINS_HEADING = "## すぐできる改善"
INTENT_LABEL = "意図"
HINT_LABEL = "ヒント"


def _render_question(number: int, question: Question) -> str:
    return "\n".join([
        f"### Q{number}. {question.question}",
        f"- **{INTENT_LABEL}**: {question.intent}",
        f"- **{HINT_LABEL}**: {question.hint}",
    ])


def render_markdown(result: CritiqueResult) -> str:
    """Render a critique as markdown.

    Blocks are separated by exactly one blank line, in fixed order: title,
    preamble, question list, then quick wins when there are any.
    """
    blocks = [f"# {result.title}", PREAMBLE, QUESTIONS_HEADING]
    blocks.extend(
        _render_question(i, question) for i, question in enumerate(result.questions, start=1)
    )

    if result.quick_wins:
        bullets = "\n".join(f"- {win}" for win in result.quick_wins)
        blocks.extend(["---", f"{QUICK_WINS_HEADING}\n{bullets}"])

    return "\n\n".join(blocks)


def format_review(result: CritiqueResult) -> FormattedReview:
    """Format a validated critique into a FormattedReview."""
    return FormattedReview(text=render_markdown(result), data=result)

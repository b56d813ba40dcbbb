"""Data models for critique results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_quick_wins(value: Any) -> Any:
    """Normalize quick wins to a list of strings.

    The model may emit a single string instead of a list. A bare string
    becomes a one-element list, ``None`` becomes an empty list. Any other
    value is returned unchanged so validation can reject it.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class CodeSubmission(BaseModel):
    """Code submitted for review."""

    code: str = Field(description="Raw source code as pasted by the user")


class Question(BaseModel):
    """A single critique point raised by the professor."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    question: str = Field(description="Question quoting concrete code")
    intent: str = Field(description="What the question is meant to check")
    hint: str = Field(description="A hint for thinking about the answer")


class CritiqueResult(BaseModel):
    """Structured critique returned by the generator.

    ``quick_wins`` travels as ``quickWins`` on the wire and accepts either a
    string or a list of strings; it is always stored as a list.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1, description="Title hitting the core problem of the code")
    questions: list[Question] = Field(description="Questions in presentation order")
    quick_wins: list[str] = Field(
        default_factory=list,
        alias="quickWins",
        description="Small improvements that can be made right away",
    )

    @field_validator("quick_wins", mode="before")
    @classmethod
    def _normalize_quick_wins(cls, value: Any) -> Any:
        return normalize_quick_wins(value)

    def to_json_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary using wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class FormattedReview(BaseModel):
    """A critique together with its rendered markdown text."""

    text: str = Field(description="Markdown rendering of data")
    data: CritiqueResult = Field(description="The critique the text was rendered from")

    @classmethod
    def from_result(cls, result: CritiqueResult) -> "FormattedReview":
        """Render a critique into a formatted review."""
        from profreview.review.formatter import render_markdown

        return cls(text=render_markdown(result), data=result)

    def to_markdown(self) -> str:
        """Get the markdown rendering."""
        return self.text

    def to_json_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary using wire field names."""
        return {"text": self.text, "data": self.data.to_json_dict()}

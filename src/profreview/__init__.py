"""profreview - question-driven code review powered by DSPy."""

__version__ = "0.1.0"

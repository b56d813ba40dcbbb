"""Reporter modules for outputting reviews."""

from profreview.reporters.base import BaseReporter
from profreview.reporters.stdout import StdoutReporter

__all__ = [
    "BaseReporter",
    "StdoutReporter",
]

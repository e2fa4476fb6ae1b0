"""Abstract base formatter and output container.

WHY: Every output format consumes the same normalized CoverageReport but
produces different file content. This base class enforces a consistent
interface so the CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content (string or bytes) and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list, even for single-file formats
- ``suffix`` starts with a hyphen, e.g. ``"-preprocessed.xml"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from opencover_preprocessor.core.ir import CoverageReport


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-preprocessed.xml"`` → ``"coverage-preprocessed.xml"``.
        content: The file content as a string or bytes.
        media_type: MIME type for the content, e.g. ``"application/xml"``.
    """

    suffix: str
    content: str | bytes
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'OpenCover XML'."""

    @abstractmethod
    def format(self, report: CoverageReport) -> list[FormatterOutput]:
        """Convert the normalized report into one or more output files.

        Args:
            report: The coverage report after preprocessing.

        Returns:
            List of FormatterOutput objects, each containing a file suffix,
            content string/bytes, and MIME type.
        """

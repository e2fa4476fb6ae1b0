"""Output formatter registry.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["opencover_xml"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from opencover_preprocessor.formatters.class_summary import ClassSummaryFormatter
from opencover_preprocessor.formatters.opencover_xml import OpenCoverXmlFormatter

if TYPE_CHECKING:
    from opencover_preprocessor.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "opencover_xml": OpenCoverXmlFormatter,
    "class_summary": ClassSummaryFormatter,
}

DEFAULT_FORMATS = ["opencover_xml"]

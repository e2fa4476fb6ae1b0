"""OpenCover XML writer for preprocessed reports.

WHY: Downstream report renderers read OpenCover XML, not our IR. The
preprocessed report must therefore come out as the same document that
went in, with only the startup-code class names changed.

HOW: Every CoverageClass loaded from XML holds a handle to its <Class>
element. The formatter writes each class's current full_name into that
element's <FullName> child and serializes the original tree.

RULES:
- Only <FullName> text of classes is written; all other content is kept
- The report must have been loaded from XML (source_tree is set)
- Output is UTF-8 with an XML declaration
- Output suffix: "-preprocessed.xml"
- Media type: "application/xml"
"""

from __future__ import annotations

from typing import List
from xml.etree import ElementTree as ET

from opencover_preprocessor.core.ir import CoverageReport
from opencover_preprocessor.formatters.base import BaseFormatter, FormatterOutput


def _sync_class_names(report: CoverageReport) -> None:
    for module in report.modules:
        for cls in module.classes:
            # full_name is None exactly when the loader found no <FullName>
            if cls.element is None or cls.full_name is None:
                continue
            cls.element.find("FullName").text = cls.full_name


class OpenCoverXmlFormatter(BaseFormatter):
    """Formatter that writes the preprocessed report back as OpenCover XML."""

    @property
    def name(self) -> str:
        return "OpenCover XML"

    def format(self, report: CoverageReport) -> List[FormatterOutput]:
        if report.source_tree is None:
            raise ValueError(
                "OpenCover XML output requires a report loaded from XML"
            )

        _sync_class_names(report)
        content = ET.tostring(
            report.source_tree.getroot(),
            encoding="utf-8",
            xml_declaration=True,
        )

        return [
            FormatterOutput(
                suffix="-preprocessed.xml",
                content=content,
                media_type="application/xml",
            )
        ]

"""OpenCover XML report loader.

WHY: OpenCover writes a CoverageSession document with one <Module> per
assembly, each listing its classes, methods, file references and sequence
points. The normalizer needs that structure as typed IR, and the XML
formatter needs the original tree to write the renamed classes back.

HOW: The document is parsed with xml.etree.ElementTree. Every <Module>
descendant becomes a CoverageModule; its Classes/Class children become
CoverageClass objects in document order, each keeping a handle to its
<Class> element. Only the fields the preprocessing needs are read; every
other element stays untouched in the tree.

RULES:
- The root element must be <CoverageSession>
- Module name comes from <ModuleName>, falling back to <FullName>
- A missing <FullName> on a class is loaded as None (rejected later)
- <FileRef> must carry an integer "uid" attribute
- "sl" must be a non-negative integer when present
- Anything else that does not fit raises MalformedReportError
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional
from xml.etree import ElementTree as ET

from opencover_preprocessor.core.ir import (
    CoverageClass,
    CoverageModule,
    CoverageReport,
    MalformedReportError,
    Method,
    SequencePoint,
)

logger = logging.getLogger(__name__)

_ROOT_TAG = "CoverageSession"

# Optional sign, ASCII decimal digits only (no "_" separators, no other scripts).
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _child_text(element: ET.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None:
        return None
    return child.text or ""


def _parse_int(raw: str, what: str) -> int:
    text = raw.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise MalformedReportError(
            "Invalid {} value: {!r}".format(what, raw)
        )
    return int(text)


def _parse_sequence_point(element: ET.Element) -> SequencePoint:
    raw = element.get("sl")
    if raw is None:
        return SequencePoint()
    line = _parse_int(raw, "sequence point 'sl'")
    if line < 0:
        raise MalformedReportError("Negative sequence point line: {}".format(line))
    return SequencePoint(start_line=line)


def _parse_method(element: ET.Element) -> Method:
    file_id: Optional[int] = None
    file_ref = element.find("FileRef")
    if file_ref is not None:
        uid = file_ref.get("uid")
        if uid is None:
            raise MalformedReportError("<FileRef> without 'uid' attribute")
        file_id = _parse_int(uid, "FileRef 'uid'")

    return Method(
        name=_child_text(element, "Name") or "",
        file_id=file_id,
        sequence_points=[
            _parse_sequence_point(sp)
            for sp in element.findall("SequencePoints/SequencePoint")
        ],
    )


def _parse_class(element: ET.Element) -> CoverageClass:
    return CoverageClass(
        full_name=_child_text(element, "FullName"),
        methods=[_parse_method(m) for m in element.findall("Methods/Method")],
        element=element,
    )


def _parse_module(element: ET.Element) -> CoverageModule:
    name = _child_text(element, "ModuleName") or _child_text(element, "FullName") or ""
    return CoverageModule(
        name=name,
        classes=[_parse_class(c) for c in element.findall("Classes/Class")],
    )


def parse_report(text: str | bytes, source_filename: str = "") -> CoverageReport:
    """Parse OpenCover XML content into a CoverageReport.

    Args:
        text: The XML document as text or bytes.
        source_filename: Name of the file the content came from.

    Returns:
        The report IR, holding the parsed tree in ``source_tree``.

    Raises:
        MalformedReportError: If the content is not an OpenCover report.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedReportError("Invalid XML: {}".format(e)) from e

    if root.tag != _ROOT_TAG:
        raise MalformedReportError(
            "Expected <{}> root element, found <{}>".format(_ROOT_TAG, root.tag)
        )

    modules: List[CoverageModule] = [_parse_module(m) for m in root.iter("Module")]
    logger.debug(
        "Loaded %d module(s), %d class(es) from %s",
        len(modules),
        sum(len(m.classes) for m in modules),
        source_filename or "<string>",
    )

    return CoverageReport(
        modules=modules,
        source_filename=source_filename,
        source_tree=ET.ElementTree(root),
    )


def load_report(path: str | Path) -> CoverageReport:
    """Load an OpenCover XML report from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedReportError: If the content is not an OpenCover report.
    """
    report_path = Path(path)
    return parse_report(report_path.read_bytes(), source_filename=report_path.name)

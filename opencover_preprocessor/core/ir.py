"""Intermediate representation dataclasses for parsed coverage reports.

WHY: The OpenCover XML document is deep and noisy, but the preprocessing
steps only care about a narrow slice of it: modules, their classes in
document order, each method's file reference and the starting lines of
its sequence points. The IR gives those pieces explicit types so the
normalizer works on owned, mutable objects rather than on shared XML
state, and can be exercised in tests without any XML at all.

HOW: Five dataclasses form a hierarchy:
  SequencePoint: one instrumented statement (only its start line matters)
  Method: a method with an optional file reference
  CoverageClass: a class with a mutable FullName and its methods
  CoverageModule: an assembly holding classes in document order
  CoverageReport: the complete report, one entry per module

RULES:
- CoverageClass.full_name is the only field the normalizer ever writes
- full_name is None only for malformed input (missing <FullName>)
- Method.file_id is None when the method has no <FileRef>
- SequencePoint.start_line is None when no "sl" attribute was recorded
- List order is document order; it is significant for tie-breaking
- XML handles (element / source_tree) are opaque and excluded from
  equality and repr
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class MalformedReportError(ValueError):
    """The report tree does not have the shape the preprocessor expects.

    Distinct from the ordinary "no owner found" outcome, which is silent.
    """


@dataclass
class SequencePoint:
    """A single instrumented statement. Only its starting line is used."""

    start_line: int | None = None


@dataclass
class Method:
    """A method of a class.

    RULES:
    - name: display name from <Name>, informational only
    - file_id: integer uid of the referenced file, or None without <FileRef>
    - sequence_points: in document order
    """

    name: str
    file_id: int | None = None
    sequence_points: list[SequencePoint] = field(default_factory=list)


@dataclass
class CoverageClass:
    """A class entry in a module.

    WHY: Startup-code classes are identified purely by their FullName and
    are renamed in place, so the name has to be a plain mutable field.
    There is no stored "kind": whether a class is startup code is
    recomputed from full_name whenever it is needed.

    HOW: The loader keeps a handle to the originating <Class> element in
    ``element`` so the XML formatter can write the final name back.
    """

    full_name: str | None
    methods: list[Method] = field(default_factory=list)
    element: Any = field(default=None, repr=False, compare=False)


@dataclass
class CoverageModule:
    """An assembly in the report, holding its classes in document order."""

    name: str
    classes: list[CoverageClass] = field(default_factory=list)


@dataclass
class CoverageReport:
    """The complete intermediate representation of a coverage report.

    RULES:
    - modules: every <Module> in the report, in document order
    - source_filename: original report filename (for output naming)
    - source_tree: the parsed ElementTree when loaded from XML, else None
    """

    modules: list[CoverageModule]
    source_filename: str = ""
    source_tree: Any = field(default=None, repr=False, compare=False)

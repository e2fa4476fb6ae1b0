"""Attribution of compiler-generated startup code to its owning class.

WHY: The F# compiler emits module initialisation code as synthetic
classes named "<StartupCode$Assembly>/$File". In a coverage report they
appear as stray top-level classes that no user wrote. Nesting each one
under the real class whose code sits right above it in the same source
file makes the report read the way the source does.

HOW: Each module is handled on its own. Classes are partitioned into
startup-code classes and ordinary classes. For every startup-code class
an anchor (file id, first line) is computed from its methods. The owner
is the ordinary class in the same file whose first line is the largest
one not exceeding the anchor line. On a tie, the class later in document
order wins. The startup class is then renamed to "Owner/<original name>".

RULES:
- Startup-code class: FullName starts with "<StartupCode$" (any case)
  AND already contains "/"
- Ordinary class: FullName does not start with "<StartupCode$"
- Prefix without "/" → neither startup-code nor ordinary (ignored)
- Only methods with a file reference contribute to an anchor
- More than one distinct file id → no anchor (ambiguous, skipped)
- No recorded start line → no anchor (skipped)
- Candidates must share the anchor file id and start at or before it
- Classes are never matched across modules
- Only startup-code classes' full_name is written; nothing is added
  or removed
- Missing FullName raises MalformedReportError
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple, TypeVar

from opencover_preprocessor.config import NESTED_TYPE_SEPARATOR, STARTUP_CODE_PREFIX
from opencover_preprocessor.core.ir import (
    CoverageClass,
    CoverageModule,
    CoverageReport,
    MalformedReportError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PREFIX_FOLDED = STARTUP_CODE_PREFIX.lower()


class Anchor(NamedTuple):
    """Matching key of a class: the single file it lives in and its first line."""

    file_id: int
    line: int


@dataclass
class StartupCodeRename:
    """Record of one applied rename, reported to callers for display."""

    module: str
    old_name: str
    new_name: str


def _has_startup_prefix(full_name: str) -> bool:
    return full_name.lower().startswith(_PREFIX_FOLDED)


def is_startup_code_class(cls: CoverageClass) -> bool:
    """Return True for compiler-generated startup code that can be nested."""
    name = cls.full_name
    return (
        name is not None
        and _has_startup_prefix(name)
        and NESTED_TYPE_SEPARATOR in name
    )


def is_ordinary_class(cls: CoverageClass) -> bool:
    """Return True for classes that may own startup code."""
    return cls.full_name is not None and not _has_startup_prefix(cls.full_name)


def compute_anchor(cls: CoverageClass) -> Optional[Anchor]:
    """Compute the (file id, first line) anchor of a class.

    RULES:
    - Methods without a file reference are ignored entirely
    - Returns None when no method has a file reference
    - Returns None when the methods reference more than one file
    - Returns None when no sequence point records a start line
    - Otherwise the line is the minimum start line across those methods
    """
    methods = [m for m in cls.methods if m.file_id is not None]
    file_ids = {m.file_id for m in methods}
    if len(file_ids) != 1:
        return None

    lines = [
        point.start_line
        for method in methods
        for point in method.sequence_points
        if point.start_line is not None
    ]
    if not lines:
        return None

    return Anchor(file_id=file_ids.pop(), line=min(lines))


def select_closest_preceding(
    anchor_line: int,
    candidates: Iterable[Tuple[int, T]],
) -> Optional[T]:
    """Pick the candidate starting closest to, but not after, anchor_line.

    WHY: Startup code for a file is emitted after the types declared above
    it, so the nearest preceding class is the most plausible owner.

    HOW: A single pass over (line, item) pairs in document order, keeping
    a running best. A candidate replaces the best unless it starts strictly
    earlier, so equal lines resolve to the later item.

    RULES:
    - Lines greater than anchor_line are never selected
    - Largest qualifying line wins
    - Ties go to the item encountered last
    - Returns None when nothing qualifies

    Args:
        anchor_line: First line of the startup code.
        candidates: (first line, item) pairs in document order.

    Returns:
        The selected item, or None.
    """
    best: Optional[T] = None
    best_line: Optional[int] = None

    for line, item in candidates:
        if line > anchor_line:
            continue
        if best_line is not None and line < best_line:
            continue
        best = item
        best_line = line

    return best


def _check_full_names(module: CoverageModule) -> None:
    for index, cls in enumerate(module.classes):
        if cls.full_name is None:
            raise MalformedReportError(
                "Class #{} in module '{}' has no FullName".format(index, module.name)
            )


def _partition(
    module: CoverageModule,
) -> Tuple[List[CoverageClass], List[CoverageClass]]:
    _check_full_names(module)
    startup: List[CoverageClass] = []
    ordinary: List[CoverageClass] = []

    for cls in module.classes:
        if is_startup_code_class(cls):
            startup.append(cls)
        elif is_ordinary_class(cls):
            ordinary.append(cls)

    return startup, ordinary


def normalize_module(
    module: CoverageModule,
    on_rename: Optional[Callable[[StartupCodeRename], None]] = None,
) -> List[StartupCodeRename]:
    """Nest the startup-code classes of one module under their owners.

    Classification is done once, up front, so a rename applied during this
    pass never turns a startup class into a candidate for another.

    Args:
        module: The module to process; mutated in place.
        on_rename: Optional callback invoked for every applied rename.

    Returns:
        The renames applied, in document order.

    Raises:
        MalformedReportError: If any class in the module has no FullName.
    """
    startup_classes, ordinary_classes = _partition(module)
    if not startup_classes:
        return []

    ordinary_anchors = [(cls, compute_anchor(cls)) for cls in ordinary_classes]
    renames: List[StartupCodeRename] = []

    for startup_class in startup_classes:
        anchor = compute_anchor(startup_class)
        if anchor is None:
            logger.debug(
                "Skipping %s in %s: no single file or no line information",
                startup_class.full_name, module.name,
            )
            continue

        owner = select_closest_preceding(
            anchor.line,
            (
                (candidate_anchor.line, cls)
                for cls, candidate_anchor in ordinary_anchors
                if candidate_anchor is not None
                and candidate_anchor.file_id == anchor.file_id
            ),
        )
        if owner is None:
            logger.debug(
                "No owner for %s in %s (file %d, line %d)",
                startup_class.full_name, module.name, anchor.file_id, anchor.line,
            )
            continue

        old_name = startup_class.full_name
        startup_class.full_name = "{}{}{}".format(
            owner.full_name, NESTED_TYPE_SEPARATOR, old_name,
        )
        rename = StartupCodeRename(
            module=module.name,
            old_name=old_name,
            new_name=startup_class.full_name,
        )
        logger.info("Renamed %s -> %s", rename.old_name, rename.new_name)
        renames.append(rename)
        if on_rename is not None:
            on_rename(rename)

    return renames


def normalize_report(
    report: CoverageReport,
    max_workers: int = 1,
    on_rename: Optional[Callable[[StartupCodeRename], None]] = None,
) -> None:
    """Apply startup-code attribution to every module of a report.

    WHY: This is the single entry point the pipeline calls after loading.
    Modules share nothing, so they can be processed concurrently when a
    report holds many assemblies.

    HOW: With max_workers <= 1 modules are processed sequentially. Otherwise
    each module is handed to a thread pool worker; each worker mutates only
    its own module. on_rename callbacks are always delivered on the calling
    thread, in module order.

    RULES:
    - Mutates the report in place and returns nothing
    - Results are identical regardless of max_workers
    - Every class of every module is checked for a FullName first; on
      MalformedReportError the report is left untouched
    """
    for module in report.modules:
        _check_full_names(module)

    if max_workers <= 1 or len(report.modules) <= 1:
        for module in report.modules:
            normalize_module(module, on_rename=on_rename)
        return

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(pool.map(normalize_module, report.modules))

    if on_rename is not None:
        for renames in results:
            for rename in renames:
                on_rename(rename)

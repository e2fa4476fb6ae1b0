"""JSON class summary formatter.

WHY: Reviewing where startup code ended up is tedious in raw OpenCover
XML. A compact JSON listing of every class with its files and first line
shows at a glance which owner each startup class was nested under, and is
easy for scripts to consume.

HOW: Walks modules and classes in document order and emits one object per
class. The output is validated with jsonschema against
class_summary_schema.json before returning.

RULES:
- One entry per class, in document order
- files: sorted distinct file ids referenced by the class's methods
- firstLine: minimum recorded start line across all methods, or null
- startupCode: True when the name still carries the startup-code prefix
- Output suffix: "-classes.json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from opencover_preprocessor.config import STARTUP_CODE_PREFIX
from opencover_preprocessor.core.ir import CoverageClass, CoverageReport
from opencover_preprocessor.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "class_summary_schema.json"

_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _class_entry(cls: CoverageClass) -> dict[str, Any]:
    full_name = cls.full_name or ""
    lines = [
        point.start_line
        for method in cls.methods
        for point in method.sequence_points
        if point.start_line is not None
    ]
    return {
        "fullName": full_name,
        "files": sorted({m.file_id for m in cls.methods if m.file_id is not None}),
        "firstLine": min(lines) if lines else None,
        # "Owner/<StartupCode$..." no longer starts with the prefix
        "startupCode": STARTUP_CODE_PREFIX.lower() in full_name.lower(),
    }


class ClassSummaryFormatter(BaseFormatter):
    """Formatter that lists every class of the report as JSON."""

    @property
    def name(self) -> str:
        return "Class Summary JSON"

    def format(self, report: CoverageReport) -> list[FormatterOutput]:
        """Convert the report into a schema-validated JSON class listing.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to class_summary_schema.json.
        """
        output: dict[str, Any] = {
            "source": report.source_filename,
            "modules": [
                {
                    "name": module.name,
                    "classes": [_class_entry(cls) for cls in module.classes],
                }
                for module in report.modules
            ],
        }

        jsonschema.validate(instance=output, schema=_get_schema())

        return [
            FormatterOutput(
                suffix="-classes.json",
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]

"""Report loaders that build the coverage IR from files on disk."""

from opencover_preprocessor.parser.opencover_xml import load_report, parse_report

__all__ = ["load_report", "parse_report"]

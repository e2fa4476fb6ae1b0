"""Unit tests for the OpenCover XML loader.

WHY: The normalizer trusts the IR completely. A loader that drops a
FileRef or misreads a line number changes which class owns startup code.

HOW: Tests parse the shared sample report and small hand-written
documents covering optional fields and malformed input.
"""

import pytest

from opencover_preprocessor.core.ir import MalformedReportError
from opencover_preprocessor.parser.opencover_xml import load_report, parse_report


def _session(classes_xml):
    return (
        "<CoverageSession><Modules><Module><ModuleName>M</ModuleName>"
        "<Classes>{}</Classes></Module></Modules></CoverageSession>"
    ).format(classes_xml)


class TestSampleReport:
    """The shared sample loads into the expected IR."""

    def test_modules_in_document_order(self, sample_report):
        assert [m.name for m in sample_report.modules] == ["Shapes", "Other"]

    def test_classes_in_document_order(self, sample_report):
        names = [c.full_name for c in sample_report.modules[0].classes]
        assert names == ["Foo", "Bar", "<StartupCode$Shapes>/$Shapes"]

    def test_file_refs_and_lines(self, sample_report):
        foo = sample_report.modules[0].classes[0]
        assert foo.methods[0].name == "System.Int32 Foo::Area()"
        assert foo.methods[0].file_id == 7
        assert [sp.start_line for sp in foo.methods[0].sequence_points] == [3, 1]

    def test_missing_sl_is_none(self, sample_report):
        startup = sample_report.modules[0].classes[2]
        assert [sp.start_line for sp in startup.methods[0].sequence_points] == [15, None]

    def test_keeps_source_tree_and_elements(self, sample_report):
        assert sample_report.source_tree is not None
        assert sample_report.source_filename == "coverage.xml"
        bar = sample_report.modules[0].classes[1]
        assert bar.element.find("FullName").text == "Bar"

    def test_load_from_disk(self, sample_report_path):
        report = load_report(sample_report_path)
        assert report.source_filename == "coverage.xml"
        assert len(report.modules) == 2


class TestOptionalFields:
    """Absent optional elements load as None, not as errors."""

    def test_method_without_file_ref(self):
        report = parse_report(_session(
            "<Class><FullName>A</FullName><Methods><Method><Name>x</Name>"
            "<SequencePoints><SequencePoint sl='4'/></SequencePoints>"
            "</Method></Methods></Class>"
        ))
        method = report.modules[0].classes[0].methods[0]
        assert method.file_id is None
        assert method.sequence_points[0].start_line == 4

    def test_class_without_methods(self):
        report = parse_report(_session("<Class><FullName>A</FullName></Class>"))
        assert report.modules[0].classes[0].methods == []

    def test_missing_full_name_loads_as_none(self):
        report = parse_report(_session("<Class><Methods/></Class>"))
        assert report.modules[0].classes[0].full_name is None

    def test_module_name_falls_back_to_full_name(self):
        report = parse_report(
            "<CoverageSession><Modules><Module><FullName>C:\\bin\\M.dll</FullName>"
            "</Module></Modules></CoverageSession>"
        )
        assert report.modules[0].name == "C:\\bin\\M.dll"
        assert report.modules[0].classes == []

    def test_empty_session(self):
        assert parse_report("<CoverageSession/>").modules == []


class TestMalformedInput:
    """Input that does not fit the OpenCover shape raises MalformedReportError."""

    def test_invalid_xml(self):
        with pytest.raises(MalformedReportError, match="Invalid XML"):
            parse_report("<CoverageSession>")

    def test_wrong_root(self):
        with pytest.raises(MalformedReportError, match="CoverageSession"):
            parse_report("<coverage/>")

    def test_file_ref_without_uid(self):
        with pytest.raises(MalformedReportError, match="uid"):
            parse_report(_session(
                "<Class><FullName>A</FullName><Methods><Method>"
                "<FileRef/></Method></Methods></Class>"
            ))

    def test_non_integer_uid(self):
        with pytest.raises(MalformedReportError):
            parse_report(_session(
                "<Class><FullName>A</FullName><Methods><Method>"
                "<FileRef uid='x'/></Method></Methods></Class>"
            ))

    def test_non_integer_line(self):
        with pytest.raises(MalformedReportError, match="sl"):
            parse_report(_session(
                "<Class><FullName>A</FullName><Methods><Method>"
                "<SequencePoints><SequencePoint sl='ten'/></SequencePoints>"
                "</Method></Methods></Class>"
            ))

    @pytest.mark.parametrize("uid", ["1_0", "٣", "1.0", ""])
    def test_uid_must_be_ascii_decimal(self, uid):
        with pytest.raises(MalformedReportError, match="uid"):
            parse_report(_session(
                "<Class><FullName>A</FullName><Methods><Method>"
                "<FileRef uid='{}'/></Method></Methods></Class>".format(uid)
            ))

    @pytest.mark.parametrize("sl", ["1_5", "٣", "3e2"])
    def test_line_must_be_ascii_decimal(self, sl):
        with pytest.raises(MalformedReportError, match="sl"):
            parse_report(_session(
                "<Class><FullName>A</FullName><Methods><Method>"
                "<SequencePoints><SequencePoint sl='{}'/></SequencePoints>"
                "</Method></Methods></Class>".format(sl)
            ))

    def test_surrounding_whitespace_and_sign_accepted(self):
        report = parse_report(_session(
            "<Class><FullName>A</FullName><Methods><Method>"
            "<FileRef uid=' +7 '/>"
            "<SequencePoints><SequencePoint sl=' 12 '/></SequencePoints>"
            "</Method></Methods></Class>"
        ))
        method = report.modules[0].classes[0].methods[0]
        assert method.file_id == 7
        assert method.sequence_points[0].start_line == 12

    def test_negative_line(self):
        with pytest.raises(MalformedReportError, match="Negative"):
            parse_report(_session(
                "<Class><FullName>A</FullName><Methods><Method>"
                "<SequencePoints><SequencePoint sl='-1'/></SequencePoints>"
                "</Method></Methods></Class>"
            ))

    def test_malformed_report_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_report("not xml")

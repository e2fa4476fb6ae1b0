"""Shared test fixtures for the opencover_preprocessor test suite.

WHY: Loader, formatter and CLI tests all need the same realistic OpenCover
report. Centralizing it here keeps the sample consistent across modules.

HOW: SAMPLE_REPORT_XML is a trimmed OpenCover document for an F# project
with two modules. Fixtures provide it as text, as a file on disk and as a
loaded CoverageReport.

RULES:
- Module "Shapes" holds Foo (line 1), Bar (line 10) and a startup class
  anchored at line 15 in file 7, which belongs under Bar.
- Module "Other" reuses file uid 7 but only holds a startup class, so it
  must stay unrenamed (no cross-module matching).
"""

import pytest

from opencover_preprocessor.parser.opencover_xml import parse_report


SAMPLE_REPORT_XML = """<?xml version="1.0" encoding="utf-8"?>
<CoverageSession xmlns:xsd="http://www.w3.org/2001/XMLSchema">
  <Summary numSequencePoints="6" visitedSequencePoints="5" />
  <Modules>
    <Module hash="AA-BB">
      <ModuleName>Shapes</ModuleName>
      <Files>
        <File uid="7" fullPath="C:\\src\\Shapes.fs" />
      </Files>
      <Classes>
        <Class>
          <FullName>Foo</FullName>
          <Methods>
            <Method visited="true">
              <Name>System.Int32 Foo::Area()</Name>
              <FileRef uid="7" />
              <SequencePoints>
                <SequencePoint vc="1" sl="3" />
                <SequencePoint vc="1" sl="1" />
              </SequencePoints>
            </Method>
          </Methods>
        </Class>
        <Class>
          <FullName>Bar</FullName>
          <Methods>
            <Method visited="true">
              <Name>System.Void Bar::.ctor()</Name>
              <FileRef uid="7" />
              <SequencePoints>
                <SequencePoint vc="1" sl="10" />
              </SequencePoints>
            </Method>
          </Methods>
        </Class>
        <Class>
          <FullName>&lt;StartupCode$Shapes&gt;/$Shapes</FullName>
          <Methods>
            <Method visited="true">
              <Name>System.Void &lt;StartupCode$Shapes&gt;.$Shapes::main@()</Name>
              <FileRef uid="7" />
              <SequencePoints>
                <SequencePoint vc="1" sl="15" />
                <SequencePoint vc="0" />
              </SequencePoints>
            </Method>
          </Methods>
        </Class>
      </Classes>
    </Module>
    <Module hash="CC-DD">
      <ModuleName>Other</ModuleName>
      <Classes>
        <Class>
          <FullName>&lt;StartupCode$Other&gt;/$Other</FullName>
          <Methods>
            <Method visited="true">
              <Name>System.Void &lt;StartupCode$Other&gt;.$Other::main@()</Name>
              <FileRef uid="7" />
              <SequencePoints>
                <SequencePoint vc="1" sl="20" />
              </SequencePoints>
            </Method>
          </Methods>
        </Class>
      </Classes>
    </Module>
  </Modules>
</CoverageSession>
"""


@pytest.fixture
def sample_report_xml():
    """The sample OpenCover document as text."""
    return SAMPLE_REPORT_XML


@pytest.fixture
def sample_report_path(tmp_path):
    """The sample OpenCover document written to coverage.xml in tmp_path."""
    path = tmp_path / "coverage.xml"
    path.write_text(SAMPLE_REPORT_XML, encoding="utf-8")
    return path


@pytest.fixture
def sample_report():
    """The sample OpenCover document loaded into the IR."""
    return parse_report(SAMPLE_REPORT_XML, source_filename="coverage.xml")

"""
Tests for analysis.json output.
"""

import json

from undacted.models import AnalysisParams, Profile, Rect
from undacted.analysis import analyze_redaction
from undacted.output_writer import write_analysis_json


def test_write_analysis_json(tmp_path, redacted_page, black_box):
    summary = analyze_redaction(redacted_page, black_box, Rect(10, 60, 20, 12), "word")
    profile = Profile(id="p1", name="Jane Roe", role="Counsel", clearance="L2")

    path = write_analysis_json(summary, AnalysisParams(), tmp_path / "out" / "analysis.json", profile)
    record = json.loads(path.read_text(encoding="utf-8"))

    assert set(record) == {"analysis_timestamp", "parameters", "result", "match"}
    assert record["parameters"]["dark_threshold"] == 60
    assert record["result"]["estimated_hidden_chars"] == 8
    assert record["match"]["name"] == "Jane Roe"


def test_write_analysis_json_without_match(tmp_path, redacted_page, black_box):
    summary = analyze_redaction(redacted_page, black_box, Rect(10, 60, 20, 12), "word")

    path = write_analysis_json(summary, AnalysisParams(), tmp_path / "analysis.json")
    assert json.loads(path.read_text(encoding="utf-8"))["match"] is None

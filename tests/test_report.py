import json
import textwrap

from jsrefactor.report import RefactorReport


def test_report_to_text_includes_expected_sections():
    report = RefactorReport(
        input_path="bundle.js",
        input_length=120,
        output_length=90,
        folded_nodes={"expand_boolean": 2, "compress_commas": 1},
        variables_renamed=4,
        aliases_unshortened=1,
        debug_insertions=3,
        seed=10,
        passes_run=["expand_boolean", "compress_commas", "render"],
        warnings=["could not write output"],
        errors=["render: disk full"],
    )

    rendered = report.to_text()

    expected = textwrap.dedent(
        """
        Input: bundle.js
        Input length: 120 chars
        Passes: expand_boolean, compress_commas, render
        Folded nodes: 3
          compress_commas: 1
          expand_boolean: 2
        Aliases unshortened: 1
        Variables renamed: 4 (seed 10)
        Debugger statements inserted: 3
        Final output length: 90 chars
        Warnings:
          - could not write output
        Errors:
          - render: disk full
        """
    ).strip()

    assert rendered == expected


def test_report_to_json_is_serialisable():
    report = RefactorReport(folded_nodes={"computed_to_static": 5})
    data = report.to_json()
    assert data["total_folded"] == 5
    assert data["seed"] is None
    assert json.loads(json.dumps(data)) == data


def test_empty_report_text():
    text = RefactorReport().to_text()
    assert "Folded nodes: 0" in text
    assert "Variables renamed: 0" in text
    assert "Warnings" not in text

import json
from pathlib import Path

import pytest

from jsrefactor import cli


def test_cli_prints_to_stdout(js_file, capsys) -> None:
    source = js_file("if (!0) a['b'] = (1, 2);")
    assert cli.main([str(source)]) == 0
    captured = capsys.readouterr()
    assert captured.out == "if (true)\n  a.b = 2;\n"


def test_cli_writes_output_and_report(js_file, tmp_path: Path) -> None:
    source = js_file("let r = require; r('x');")
    output = tmp_path / "out.js"
    report = tmp_path / "report.json"
    code = cli.main(
        [
            str(source),
            "-o",
            str(output),
            "--unshorten",
            'VariableDeclarator[init.name="require"]',
            "--report",
            str(report),
        ]
    )
    assert code == 0
    assert output.read_text(encoding="utf-8") == 'require("x");\n'
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["aliases_unshortened"] == 1
    assert data["output_length"] == len('require("x");\n')


def test_cli_pass_selection(js_file, capsys) -> None:
    source = js_file("x = !0 ? 1 : 2;")
    assert cli.main([str(source), "--pass", "expand_boolean"]) == 0
    assert capsys.readouterr().out == "x = true ? 1 : 2;\n"

    assert cli.main([str(source), "--skip", "compress_conditionals,expand_boolean"]) == 0
    assert capsys.readouterr().out == "x = !0 ? 1 : 2;\n"


def test_cli_seed_and_debug_selector(js_file, capsys) -> None:
    source = js_file("(function (a) { return a; });")
    assert cli.main([str(source), "--seed", "3", "--debug-selector", "FunctionExpression"]) == 0
    out = capsys.readouterr().out
    assert "debugger;" in out
    assert "$arg0_" in out


def test_cli_profile_with_override(js_file, tmp_path: Path, capsys) -> None:
    profile = tmp_path / "profile.json"
    profile.write_text(json.dumps({"passes": ["computed_to_static"], "seed": 2}), encoding="utf-8")
    source = js_file("a['b'] = !0;")
    assert cli.main([str(source), "--profile", str(profile)]) == 0
    assert capsys.readouterr().out == "a.b = !0;\n"


def test_cli_parse_error_exit_code(js_file, capsys) -> None:
    source = js_file("let = ;")
    assert cli.main([str(source)]) == 1
    assert "error:" in capsys.readouterr().err


def test_cli_missing_input(tmp_path: Path, capsys) -> None:
    assert cli.main([str(tmp_path / "missing.js")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_cli_usage_errors(js_file) -> None:
    source = js_file("a;")
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(source), "--pass", "nope"])
    assert excinfo.value.code == 2

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(source), "--unshorten", "Nope["])
    assert excinfo.value.code == 2

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2


def test_cli_timings_and_log_file(js_file, tmp_path: Path, capsys) -> None:
    source = js_file("a;")
    log_file = tmp_path / "trace.log"
    assert cli.main([str(source), "--timings", "--log-file", str(log_file)]) == 0
    err = capsys.readouterr().err
    assert "Pass" in err and "render" in err
    assert "pass render completed" in log_file.read_text(encoding="utf-8")

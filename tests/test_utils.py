import logging
from enum import Enum
from pathlib import Path

from jsrefactor import utils
from jsrefactor.logging_config import close_debug_logger, configure_debug_file_logger


class Colour(str, Enum):
    RED = "red"


def test_safe_write_and_read(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "file.js"
    assert utils.safe_write_file(str(target), "x;") is True
    assert utils.safe_read_file(str(target)) == "x;"
    assert utils.safe_read_file(str(tmp_path / "missing.js")) is None


def test_safe_write_reports_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    assert utils.safe_write_file(str(blocker / "child.js"), "x") is False


def test_summarise_metadata_serialises_nested_values() -> None:
    summary = utils.summarise_metadata(
        {"colour": Colour.RED, "items": (1, {2}), "nested": {"path": Path("x")}}
    )
    assert summary["colour"] == "red"
    assert summary["items"] == [1, [2]]
    assert summary["nested"]["path"] == repr(Path("x"))


def test_format_pass_summary() -> None:
    table = utils.format_pass_summary([("expand_boolean", 0.0123), ("render", 1.5)])
    assert table.splitlines() == [
        "Pass            Duration",
        "expand_boolean  0.012s",
        "render          1.500s",
    ]
    assert utils.format_pass_summary([]) == ""


def test_debug_file_logger_replaces_previous_trace(tmp_path: Path) -> None:
    path = tmp_path / "trace.log"
    logger = configure_debug_file_logger("jsrefactor.tests.trace", path)
    logger.debug("first")
    logger = configure_debug_file_logger("jsrefactor.tests.trace", path)
    logger.debug("second")
    close_debug_logger(logger)

    text = path.read_text(encoding="utf-8")
    assert "second" in text and "first" not in text
    assert not logger.handlers
    logging.getLogger("jsrefactor.tests.trace").propagate = True

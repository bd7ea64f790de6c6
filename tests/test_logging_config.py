import json
import logging
import sys
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from _pytest.logging import LogCaptureFixture

import src.logging_config as logging_config
from src.application.services.standings_service import (
    StandingsReport,
    Skipped,
    log_standings_summary,
)
from src.domain.value_objects.enums import SkipReason
from src.domain.value_objects.ids import MatchId
from src.logging_config import LOG_NAME, JsonFormatter, get_logger


def _reset(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def reset_logger_handlers(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Ensure tests run with a clean logger state."""
    monkeypatch.setattr(logging_config, "LOG_FILE", tmp_path / "logs" / "app.log")
    logger = logging.getLogger(LOG_NAME)
    _reset(logger)
    yield
    _reset(logger)


def test_json_formatter_returns_json_with_extras() -> None:
    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )
    record.request_id = "abc"
    record.club = "Arkonia"
    formatted = formatter.format(record)
    data = json.loads(formatted)
    assert data["level"] == "INFO"
    assert data["logger"] == "test"
    assert data["message"] == "hello"
    assert data["request_id"] == "abc"
    assert data["extra"]["club"] == "Arkonia"


def test_get_logger_configures_two_handlers(tmp_path: Path) -> None:
    logger = get_logger()
    assert len(logger.handlers) == 2
    assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert (tmp_path / "logs").is_dir()


def test_get_logger_is_parent_of_module_loggers() -> None:
    logger = get_logger(logging.WARNING)
    child = logging.getLogger("src.application.services.standings_service")
    ancestors = []
    cur: logging.Logger | None = child
    while cur is not None:
        ancestors.append(cur)
        cur = cur.parent
    assert logger in ancestors
    assert logger.level == logging.WARNING


def test_standings_summary_logging(caplog: LogCaptureFixture) -> None:
    report = StandingsReport(
        rows=[],
        outcomes=[
            Skipped(MatchId("m1"), SkipReason.UNPARSABLE_RESULT),
            Skipped(MatchId("m2"), SkipReason.UNPARSABLE_RESULT),
        ],
    )
    logger = get_logger()
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger=LOG_NAME)
    log_standings_summary(report, logger)
    logger.removeHandler(caplog.handler)
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.getMessage() == "Standings summary"
    data = json.loads(JsonFormatter().format(record))
    assert data["extra"]["skipped"] == 2
    assert data["extra"]["skip_reasons"] == {"UNPARSABLE_RESULT": 2}


def test_get_logger_ignores_foreign_handlers() -> None:
    logger = logging.getLogger(LOG_NAME)
    foreign = logging.NullHandler()
    logger.addHandler(foreign)
    get_logger(logging.WARNING)
    again = get_logger(logging.DEBUG)
    assert again.level == logging.WARNING
    assert sum(isinstance(h, RotatingFileHandler) for h in again.handlers) == 1
    assert foreign in again.handlers


def test_json_formatter_includes_exception_text() -> None:
    try:
        raise ValueError("bad row")
    except ValueError:
        record = logging.getLogger("src.test").makeRecord(
            "src.test", logging.ERROR, __file__, 1, "boom", (), sys.exc_info()
        )
    data = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad row" in data["exc_info"]
    assert "extra" not in data

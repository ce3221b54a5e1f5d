# tests/pipeline/test_logger.py
from datetime import datetime
from pathlib import Path
import logging

import pytest

from keysample.pipeline.logger import HANDLER_NAME, configure_logging, session_log_name

pytestmark = pytest.mark.usefixtures("clean_root_handlers")

WHEN = datetime(2025, 8, 18, 12, 34, 56)


@pytest.fixture()
def clean_root_handlers():
    """Start each test with a clean root logger; restore afterwards."""
    root = logging.getLogger()
    prev = list(root.handlers)
    prev_level = root.level
    try:
        for h in list(root.handlers):
            root.removeHandler(h)
        root.setLevel(logging.WARNING)
        yield
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in prev:
            root.addHandler(h)
        root.setLevel(prev_level)


def _own_handlers():
    return [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]


@pytest.mark.parametrize(
    "addresses, expected",
    [
        (["cache-a:6379"], "keysample_cache-a-6379_20250818_123456.log"),
        (["cache-a:6379", "cache-b:6380", "cache-c:6381"],
         "keysample_cache-a-6379+2_20250818_123456.log"),
        (["::1:6379"], "keysample_1-6379_20250818_123456.log"),
        ([], "keysample_20250818_123456.log"),
    ],
)
def test_session_log_name(addresses, expected):
    assert session_log_name(addresses, WHEN) == expected


def test_session_file_is_named_after_instances(tmp_path: Path):
    log_dir = tmp_path / "logs"

    log_path = configure_logging(log_dir=log_dir, addresses=["cache-a:6379", "cache-b:6380"])

    assert log_path.parent == log_dir
    assert log_path.name.startswith("keysample_cache-a-6379+1_")
    logging.getLogger("keysample.sampling.engine").info("Sampled %d keys", 100)
    text = log_path.read_text(encoding="utf-8")
    assert "Logging session for cache-a:6379, cache-b:6380" in text
    assert "keysample.sampling.engine: Sampled 100 keys" in text


def test_verbose_without_log_dir_is_console_only():
    assert configure_logging(verbose=True) is None

    handlers = _own_handlers()
    assert [type(h) for h in handlers] == [logging.StreamHandler]
    assert logging.getLogger().level == logging.INFO


def test_nothing_requested_installs_nothing():
    assert configure_logging() is None
    assert _own_handlers() == []
    assert logging.getLogger().level == logging.WARNING


def test_reconfiguring_replaces_only_own_handlers(tmp_path: Path):
    foreign = logging.NullHandler()
    logging.getLogger().addHandler(foreign)

    configure_logging(log_dir=tmp_path, addresses=["a:1"], verbose=True)
    assert len(_own_handlers()) == 2

    configure_logging(verbose=True)
    assert [type(h) for h in _own_handlers()] == [logging.StreamHandler]
    assert foreign in logging.getLogger().handlers

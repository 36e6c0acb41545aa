import json
import logging

import pytest

from gui.services.logging_service import LOG_FORMAT, LoggingService, configure_logging


@pytest.fixture()
def svc():
    svc = LoggingService(capacity=5)
    svc.attach_root()
    root = logging.getLogger()
    previous = root.level
    root.setLevel(logging.DEBUG)
    yield svc
    root.setLevel(previous)
    svc.detach_root()


def test_logging_capture_and_retrieve(svc):
    logging.getLogger("alpha").info("Hello World")
    recents = svc.recent()
    assert any(e.message == "Hello World" and e.name == "alpha" for e in recents)


def test_logging_capacity_eviction(svc):
    for i in range(10):
        logging.getLogger("cap").info("M%d", i)
    recents = svc.recent()
    assert len(recents) == 5  # capacity
    assert recents[0].message == "M5"  # first retained after evictions
    assert [e.message for e in svc.recent(limit=2)] == ["M8", "M9"]


def test_at_least_filters_by_level(svc):
    logging.getLogger("db").debug("SQL start")
    logging.getLogger("http").warning("slow response")
    logging.getLogger("boot").error("boom")
    assert [e.message for e in svc.at_least(logging.WARNING)] == ["slow response", "boom"]


def test_export_jsonl(svc, tmp_path):
    logging.getLogger("a").info("one")
    logging.getLogger("b").warning("two")
    out = tmp_path / "logs.jsonl"
    assert svc.export_jsonl(str(out), level=logging.WARNING) == 1
    lines = out.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["message"] == "two"


def test_detach_stops_capture(svc):
    svc.detach_root()
    logging.getLogger("late").info("not seen")
    assert all(e.message != "not seen" for e in svc.recent())
    svc.clear()
    assert svc.recent() == []


def test_configure_logging_installs_console_handler():
    root = logging.getLogger()
    previous = root.level
    handler = configure_logging(verbose=True)
    try:
        assert handler in root.handlers
        assert root.level == logging.DEBUG
        assert handler.formatter._fmt == LOG_FORMAT
    finally:
        root.removeHandler(handler)
        root.setLevel(previous)

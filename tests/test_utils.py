# tests/test_utils.py

import src.utils as utils


def test_report_error_logs(caplog):
    utils.report_error("card_map", ValueError("bad"))
    assert "card_map: ValueError: bad" in caplog.text


def test_report_error_shows_caption_in_dev(monkeypatch):
    shown = []
    monkeypatch.setattr(utils, "DEV", True)
    monkeypatch.setattr(utils.st, "caption", lambda text: shown.append(text))

    utils.report_error("card_search", RuntimeError("boom"))

    assert shown == ["⚠ card_search: RuntimeError: boom"]


def test_report_error_silent_ui_outside_dev(monkeypatch):
    shown = []
    monkeypatch.setattr(utils, "DEV", False)
    monkeypatch.setattr(utils.st, "caption", lambda text: shown.append(text))

    utils.report_error("card_search", RuntimeError("boom"))

    assert shown == []

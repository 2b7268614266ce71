import json

import requests

from wisdom_insights.cli import insights as cli
from wisdom_insights.config import settings
from wisdom_insights.data_access.json_dal import JsonDal
from wisdom_insights.infra import telegram_sender


def test_patterns_prints_fallback_report(monkeypatch, capsys):
    monkeypatch.setattr(cli, "build_dal", JsonDal)

    assert cli.main(["--type", "patterns", "--user-id", "u1"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["source"] == "fallback"
    assert len(payload["patterns"]) == 7


def test_recognize_prints_result(monkeypatch, capsys):
    monkeypatch.setattr(cli, "build_dal", JsonDal)

    assert cli.main(["--type", "recognize", "--user-id", "u1", "--window-days", "30"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["totalPatternsDetected"] == 0


class ClosingDal(JsonDal):
    closed = 0

    def close(self):
        ClosingDal.closed += 1


def test_dal_is_closed_after_each_report(monkeypatch, capsys):
    monkeypatch.setattr(ClosingDal, "closed", 0)
    monkeypatch.setattr(cli, "build_dal", ClosingDal)

    assert cli.main(["--type", "patterns", "--user-id", "u1"]) == 0
    assert cli.main(["--type", "recognize", "--user-id", "u1"]) == 0
    assert ClosingDal.closed == 2


def test_send_without_credentials_is_skipped(monkeypatch, capsys):
    monkeypatch.setattr(cli, "build_dal", JsonDal)
    monkeypatch.setattr(settings, "TELEGRAM_TOKEN", None)

    assert cli.main(["--type", "patterns", "--user-id", "u1", "--send"]) == 1
    assert "TELEGRAM_TOKEN or TELEGRAM_CHAT_ID not set" in settings.log_path.read_text(encoding="utf-8")


def test_send_delivers_rendered_report(monkeypatch, capsys):
    sent = {}

    def fake_send(token, chat_id, message):
        sent.update(token=token, chat_id=chat_id, message=message)
        return True

    monkeypatch.setattr(cli, "build_dal", JsonDal)
    monkeypatch.setattr(cli, "send_telegram_message", fake_send)
    monkeypatch.setattr(settings, "TELEGRAM_TOKEN", "token")
    monkeypatch.setattr(settings, "TELEGRAM_CHAT_ID", "chat")

    assert cli.main(["--type", "patterns", "--user-id", "u1", "--send"]) == 0
    assert sent["chat_id"] == "chat"
    assert sent["message"].startswith("Weekly patterns")


def test_telegram_failure_is_logged_not_raised(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(telegram_sender.requests, "post", boom)

    assert telegram_sender.send_telegram_message("t", "c", "hello") is False
    assert "Telegram send failed: offline" in settings.log_path.read_text(encoding="utf-8")

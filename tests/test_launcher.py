import config
import main


def test_browser_is_not_opened_by_default(monkeypatch):
    opened = []
    monkeypatch.setattr(config, "OPEN_BROWSER", False)
    monkeypatch.setattr(main.webbrowser, "open", opened.append)

    assert main._open_browser("http://127.0.0.1:8000") is False
    assert opened == []


def test_browser_opens_when_enabled(monkeypatch):
    opened = []
    monkeypatch.setattr(config, "OPEN_BROWSER", True)
    monkeypatch.setattr(main.os.path, "exists", lambda path: False)
    monkeypatch.setattr(main.webbrowser, "open", opened.append)

    assert main._open_browser("http://127.0.0.1:8000") is True
    assert opened == ["http://127.0.0.1:8000"]

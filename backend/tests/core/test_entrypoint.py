"""Process entry point: runs uvicorn on the configured host and port, no arguments."""

import crud_api.__main__ as entrypoint
from crud_api.config import Settings


def test_main_runs_uvicorn_with_settings(monkeypatch):
    calls = []
    settings = Settings(_env_file=None, host="127.0.0.1", port=9090, log_level="WARNING")
    monkeypatch.setattr(entrypoint, "get_settings", lambda: settings)
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))

    entrypoint.main()

    assert calls == [(
        ("crud_api.main:app",),
        {"host": "127.0.0.1", "port": 9090, "log_level": "warning"},
    )]


def test_default_settings_bind_all_interfaces_on_8080(monkeypatch):
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    calls = []
    monkeypatch.setattr(entrypoint, "get_settings", lambda: Settings(_env_file=None))
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda *a, **kw: calls.append(kw))

    entrypoint.main()

    assert calls[0]["host"] == "0.0.0.0"
    assert calls[0]["port"] == 8080

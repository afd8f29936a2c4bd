import sys

import pytest

import main


def test_demo_resolves_first_slot(capsys):
    main.demo()

    out = capsys.readouterr().out
    assert "Slot: 2025-01-06T09:00:00+00:00 - 2025-01-06T10:00:00+00:00" in out
    assert "Attending: Ulla" in out
    assert "Not attending: Olivia, Umar" in out


def test_usage_without_arguments(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["main.py"])

    with pytest.raises(SystemExit) as excinfo:
        main.main()

    assert excinfo.value.code == 2
    assert "--resolve <event_id>" in capsys.readouterr().out


def test_resolve_reports_unreachable_service(monkeypatch, capsys):
    monkeypatch.setattr(main.SchedulingClient, "is_backend_available", lambda self: False)

    with pytest.raises(SystemExit):
        main.resolve("e1")

    assert "service not reachable" in capsys.readouterr().out

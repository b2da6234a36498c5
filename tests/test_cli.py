import sys

from dvfapi.__main__ import main

from conftest import TEST_KEY


def test_ws_endpoint(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["dvfapi", "ws-endpoint"])
    assert main() == 0
    assert capsys.readouterr().out.strip() == "wss://api.deversifi.com/market-data/ws"


def test_ws_endpoint_private(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["dvfapi", "ws-endpoint", "--private"])
    assert main() == 1


def test_sign_from_yaml(monkeypatch, capsys, tmp_path):
    fp = tmp_path / "dvf.yaml"
    fp.write_text(f'private_key: "{TEST_KEY}"\n', encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["dvfapi", "-c", str(fp), "sign", "hello", "--fixed-width"])
    assert main() == 0
    sig_line, pub_line = capsys.readouterr().out.strip().splitlines()
    assert len(sig_line) == len("Signature : ") + 128
    assert len(pub_line) == len("Public key : ") + 128


def test_sign_bad_key_reports_error(monkeypatch, capsys, tmp_path):
    fp = tmp_path / "dvf.yaml"
    fp.write_text('private_key: "abc"\n', encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["dvfapi", "-c", str(fp), "sign", "hello"])
    assert main() == 1
    assert "ERROR" in capsys.readouterr().err

from __future__ import annotations

import threading
from pathlib import Path

import pytest

import sign_asset
from fakes import SIGNATURE, FakeGPG


def _install_gpg(monkeypatch, gpg: FakeGPG) -> list[dict]:
    created = []

    def factory(**kwargs):
        created.append(kwargs)
        return gpg

    monkeypatch.setattr(sign_asset.gnupg, "GPG", factory)
    return created


def test_check_gpg_uses_loopback(monkeypatch, config: dict) -> None:
    gpg = FakeGPG()
    created = _install_gpg(monkeypatch, gpg)

    assert sign_asset.check_gpg(config) is gpg
    assert created[0]["options"] == ["--yes", "--pinentry-mode", "loopback"]
    assert created[0]["gnupghome"] is None


def test_check_gpg_without_loopback(monkeypatch, config: dict) -> None:
    config["loopback"] = False
    created = _install_gpg(monkeypatch, FakeGPG())

    sign_asset.check_gpg(config)

    assert created[0]["options"] == ["--yes"]


def test_check_gpg_missing_binary(monkeypatch, config: dict) -> None:
    def factory(**kwargs):
        raise OSError("Unable to run gpg (gpg) - it may not be available.")

    monkeypatch.setattr(sign_asset.gnupg, "GPG", factory)

    with pytest.raises(SystemExit, match="GPG not found"):
        sign_asset.check_gpg(config)


def test_check_gpg_missing_key(monkeypatch, config: dict) -> None:
    _install_gpg(monkeypatch, FakeGPG(keys=["0000000000000000"]))

    with pytest.raises(SystemExit, match="GPG key not found: ABCDEF0123456789"):
        sign_asset.check_gpg(config)


def test_sign_and_verify(config: dict, tmp_path: Path) -> None:
    asset = tmp_path / "widget.bin"
    asset.write_bytes(b"payload")
    gpg = FakeGPG()

    sig_path = sign_asset.sign_and_verify(gpg, config, str(asset))

    assert sig_path == str(asset) + ".asc"
    assert Path(sig_path).read_bytes() == SIGNATURE
    call = gpg.signed[0]
    assert call["data"] == b"payload"
    assert call["keyid"] == "ABCDEF0123456789"
    assert call["passphrase"] == "hunter2"
    assert call["detach"] is True
    assert call["clearsign"] is False
    assert call["binary"] is False
    assert gpg.verified == [(sig_path, str(asset))]


def test_sign_leaves_passphrase_to_agent(config: dict, tmp_path: Path) -> None:
    config["loopback"] = False
    asset = tmp_path / "widget.bin"
    asset.write_bytes(b"payload")
    gpg = FakeGPG()

    sign_asset.sign_asset(gpg, config, str(asset))

    assert gpg.signed[0]["passphrase"] is None


def test_sign_failure_is_fatal(config: dict, tmp_path: Path) -> None:
    asset = tmp_path / "widget.bin"
    asset.write_bytes(b"payload")

    with pytest.raises(SystemExit, match="Failed to sign widget.bin"):
        sign_asset.sign_asset(FakeGPG(sign_ok=False), config, str(asset))


def test_verify_failure_is_fatal(config: dict, tmp_path: Path) -> None:
    asset = tmp_path / "widget.bin"
    asset.write_bytes(b"payload")

    with pytest.raises(SystemExit, match="Failed to verify widget.bin.asc"):
        sign_asset.sign_and_verify(FakeGPG(verify_ok=False), config, str(asset))


def test_sign_missing_asset(config: dict, tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="Failed to sign widget.bin"):
        sign_asset.sign_asset(FakeGPG(), config, str(tmp_path / "widget.bin"))


def test_run_with_timeout_returns_result() -> None:
    assert sign_asset.run_with_timeout(1, "add", lambda a, b: a + b, 2, 3) == 5


def test_run_with_timeout_reraises() -> None:
    def boom():
        raise ValueError("bad")

    with pytest.raises(ValueError, match="bad"):
        sign_asset.run_with_timeout(1, "boom", boom)


def test_run_with_timeout_expires() -> None:
    release = threading.Event()
    try:
        with pytest.raises(SystemExit, match="gpg sign widget.bin timed out after 0.05s"):
            sign_asset.run_with_timeout(0.05, "gpg sign widget.bin", release.wait, 5)
    finally:
        release.set()

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPTS_ROOT = ROOT / "scripts"
if str(SCRIPTS_ROOT) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_ROOT))

import pytest  # noqa: E402
import requests  # noqa: E402


@pytest.fixture(autouse=True)
def _no_network(monkeypatch) -> None:
    """Fail loudly if a test reaches the real GitHub API."""

    def refuse(*args, **kwargs):
        raise AssertionError(f"unexpected network call: {args} {kwargs}")

    monkeypatch.setattr(requests, "get", refuse)
    monkeypatch.setattr(requests, "post", refuse)


@pytest.fixture
def config(tmp_path: Path) -> dict:
    return {
        "token": "secret-token",
        "owner": "acme",
        "repo": "widget",
        "tag": "v1.2.3",
        "key_id": "ABCDEF0123456789",
        "passphrase": "hunter2",
        "loopback": True,
        "gnupghome": None,
        "timeout": 10,
        "workdir": str(tmp_path),
        "api_url": "https://api.github.com",
        "server_url": "https://github.com",
        "uploads_url": "https://uploads.github.com",
    }

"""
Shared fixtures: canned explorer responses and standard-json payloads.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest


def wrap_standard_json(doc: dict) -> str:
    """Encode a standard-json-input document the way explorers return it ({{...}})."""
    return "{" + json.dumps(doc) + "}"


def standard_json(sources: dict, **settings) -> dict:
    return {
        "language": "Solidity",
        "sources": {path: {"content": content} for path, content in sources.items()},
        "settings": settings or {"optimizer": {"enabled": True, "runs": 200}},
    }


def api_item(source_code: str, name: str = "Token") -> dict:
    return {
        "SourceCode": source_code,
        "ABI": "[]",
        "ContractName": name,
        "CompilerVersion": "v0.8.17+commit.8df45f5f",
        "OptimizationUsed": "1",
        "Runs": "200",
        "ConstructorArguments": "",
        "EVMVersion": "Default",
        "Library": "",
        "LicenseType": "MIT",
        "Proxy": "0",
        "Implementation": "",
        "SwarmSource": "",
    }


def envelope_body(items: list, status: str = "1", message: str = "OK") -> bytes:
    return json.dumps({"status": status, "message": message, "result": items}).encode("utf-8")


def http_response(body: bytes, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.content = body
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    return resp


@pytest.fixture
def explorer_env(tmp_path, monkeypatch):
    """Run from an empty directory (no stray .env) with an Etherscan key set."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ETHERSCAN_APIKEY", "TESTKEY")
    monkeypatch.delenv("ETHERSCAN_BASE_URL", raising=False)
    monkeypatch.delenv("CONTRACT_FETCH_OUTPUT_DIR", raising=False)
    return tmp_path

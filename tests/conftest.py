"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

from hive_db.config import AppConfig, NodeConfig
from hive_db.database import DatabaseAPI


# ---------------------------------------------------------------------------
# Transport double
# ---------------------------------------------------------------------------


class FakeTransport:
    """Records invocations and answers from a per-method table.

    A table value may be a plain result, an exception instance to raise, or a
    callable receiving the params.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str, list[Any]]] = []

    async def invoke(self, namespace: str, method: str, params: list[Any]) -> Any:
        self.calls.append((namespace, method, params))
        answer = self.responses.get(method)
        if isinstance(answer, BaseException):
            raise answer
        if callable(answer):
            return answer(params)
        return answer

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_params(self) -> list[Any]:
        return self.calls[-1][2]


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def api(transport: FakeTransport) -> DatabaseAPI:
    return DatabaseAPI(transport)


@pytest.fixture()
def make_api() -> Callable[[dict[str, Any]], tuple[DatabaseAPI, FakeTransport]]:
    def _make(responses: dict[str, Any]) -> tuple[DatabaseAPI, FakeTransport]:
        fake = FakeTransport(responses)
        return DatabaseAPI(fake), fake

    return _make


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_node_config() -> NodeConfig:
    return NodeConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
    )


@pytest.fixture()
def sample_app_config(sample_node_config: NodeConfig) -> AppConfig:
    return AppConfig(node=sample_node_config)


SAMPLE_YAML = textwrap.dedent("""\
    node:
      rpc_endpoints:
        - "https://api.example.com"
        - "https://backup.example.com"
      rpc_timeout: 10
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample node data
# ---------------------------------------------------------------------------

TX_ID = "deadbeef" * 5


@pytest.fixture()
def sample_tx_id() -> str:
    return TX_ID


@pytest.fixture()
def sample_signed_transaction() -> dict:
    return {
        "ref_block_num": 1234,
        "ref_block_prefix": 1122334455,
        "expiration": "2026-10-19T12:00:00",
        "operations": [["vote", {"voter": "alice", "author": "bob", "permlink": "p", "weight": 10000}]],
        "extensions": [],
        "signatures": ["1f" + "00" * 64],
    }


@pytest.fixture()
def sample_block() -> dict:
    return {
        "previous": "0000000100000000000000000000000000000000",
        "timestamp": "2016-03-24T16:05:00",
        "witness": "initminer",
        "transactions": [],
    }


def _history_page(start: int, count: int) -> list[list[Any]]:
    """Node-style history page of ``count`` entries descending from ``start``."""
    return [
        [seq, {"op": ["transfer", {"from": "alice", "to": "bob", "amount": f"{seq}.000 HIVE"}]}]
        for seq in range(start, start - count, -1)
    ]


def _post(author: str, permlink: str) -> dict:
    return {"author": author, "permlink": permlink, "title": f"{author}/{permlink}"}


@pytest.fixture()
def history_page() -> Callable[[int, int], list[list[Any]]]:
    return _history_page


@pytest.fixture()
def make_post() -> Callable[[str, str], dict]:
    return _post

"""Test doubles and database helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool


OWNER_TOKEN = "owner-token"
OTHER_TOKEN = "other-token"


class ScriptedChatClient:
    """Stand-in for the chat model that returns a canned reply and records calls."""

    def __init__(self, reply: str | Exception = "{}") -> None:
        self.reply = reply
        self.calls: list[list[Mapping[str, str]]] = []
        self.closed = False

    async def complete(self, messages: Sequence[Mapping[str, str]]) -> str:
        self.calls.append(list(messages))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    async def close(self) -> None:
        self.closed = True


def make_engine(tmp_path: Path) -> AsyncEngine:
    # NullPool keeps connections from outliving the event loop that opened them.
    return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

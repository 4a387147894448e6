"""Tests for conversation-id propagation into log output."""

import io
import logging

import httpx
import pytest

from src.conversation.dialogue_engine import DialogueEngine
from src.conversation.session_store import InMemorySessionStore
from src.logging_context import LOG_FORMAT, conversation_log_handler, set_conversation_id
from src.tools.backend import HttpBackendClient
from tests.conftest import KNOWN_CI, USER


class TestHandler:
    def test_plain_logger_records_render_conversation_id(self):
        stream = io.StringIO()
        handler = conversation_log_handler(stream)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log = logging.getLogger("tests.plain_logger")
        log.addHandler(handler)
        try:
            set_conversation_id("59170000001")
            log.warning("hello")
        finally:
            log.removeHandler(handler)
        assert "[59170000001] WARNING: hello" in stream.getvalue()


class TestBackendLogs:
    @pytest.mark.asyncio
    async def test_backend_errors_carry_conversation_id(self, caplog):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        backend = HttpBackendClient(
            "http://backend.test/api/bot", transport=httpx.MockTransport(refuse),
        )
        engine = DialogueEngine(backend=backend, store=InMemorySessionStore(idle_ttl_seconds=0))
        caplog.set_level(logging.ERROR, logger="src.tools.backend")

        await engine.process_turn(USER, "2")
        await engine.process_turn(USER, KNOWN_CI)
        await backend.aclose()

        records = [r for r in caplog.records if r.name == "src.tools.backend"]
        assert records
        assert all(r.conversation_id == USER for r in records)

"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_reply_schema(self):
        from src.schemas.reply_schema import ButtonPrompt, SelectableList, ShowMenu, TextReply
        assert ShowMenu().kind == "menu"
        assert TextReply(body="x").kind == "text"
        assert ButtonPrompt(body="x", title="t").buttons == []
        assert SelectableList(body="x", title="t", action_label="a").sections == []

    def test_import_backend_schema(self):
        from src.schemas.backend_schema import BookingResult, PatientCheck
        assert not PatientCheck().found
        assert not BookingResult().confirmed

    def test_import_session_schema(self):
        from src.schemas.session_schema import DialogueStep, Session
        assert Session().step == DialogueStep.IDLE
        assert DialogueStep.IDLE == "idle"


class TestConversationImports:
    def test_package_reexports(self):
        from src.conversation import (
            DialogueEngine, DialogueStep, InMemorySessionStore, Session, SessionDataError,
        )
        assert len(DialogueStep) == 12
        assert issubclass(SessionDataError, Exception)
        assert callable(DialogueEngine)
        assert InMemorySessionStore(idle_ttl_seconds=0).get("u").is_idle
        assert Session().data is None


class TestToolImports:
    def test_import_backend(self):
        from src.tools.backend import BackendQueryService, HttpBackendClient
        assert BackendQueryService is not None
        assert HttpBackendClient is not None

    def test_mock_backend_satisfies_engine(self):
        from src.conversation import DialogueEngine
        from src.tools.mock_backend import MockClinicBackend
        assert DialogueEngine(backend=MockClinicBackend()) is not None

    def test_import_webhook_payload(self):
        from src.tools.webhook_payload import extract_inbound_message
        assert extract_inbound_message({}) is None


class TestEntryPointImports:
    def test_console_parser(self):
        from console_demo import ConsoleSession, build_parser
        args = build_parser().parse_args(["--scenario", "booking"])
        assert args.scenario == "booking"
        assert args.backend == "mock"
        assert "booking" in ConsoleSession.SCENARIOS

"""Tests for the patient registration flow."""

import pytest

from src.schemas.backend_schema import RegistrationResult
from src.schemas.reply_schema import ButtonPrompt, TextReply
from src.schemas.session_schema import DialogueStep
from tests.conftest import KNOWN_CI, USER, send_all


class TestRegistrationCI:
    @pytest.mark.parametrize("bad", ["12a45", "12 345", "CI-123", "-5", "١٢٣"])
    @pytest.mark.asyncio
    async def test_non_digit_ci_reprompts(self, engine, store, backend, bad):
        await engine.process_turn(USER, "3")
        reply = await engine.process_turn(USER, bad)
        assert isinstance(reply, ButtonPrompt)
        assert "solo números" in reply.body
        assert store.get(USER).step == DialogueStep.REGISTER_ASK_CI
        assert backend.called("check_patient") == []

    @pytest.mark.asyncio
    async def test_existing_patient_short_circuits(self, engine, store, backend):
        reply = await send_all(engine, "3", KNOWN_CI)
        assert isinstance(reply, TextReply)
        assert "Ya estás registrado/a" in reply.body
        assert "Juan Perez" in reply.body
        assert store.get(USER).is_idle
        assert backend.called("register_patient") == []

    @pytest.mark.asyncio
    async def test_new_ci_asks_first_name(self, engine, store):
        reply = await send_all(engine, "3", "7654321")
        assert isinstance(reply, ButtonPrompt)
        assert "NOMBRE" in reply.body
        session = store.get(USER)
        assert session.step == DialogueStep.REGISTER_ASK_FIRST_NAME
        assert session.data.ci == "7654321"


class TestRegistrationFields:
    @pytest.mark.asyncio
    async def test_names_are_stored_verbatim(self, engine, store):
        await send_all(engine, "3", "7654321", "ana maría")
        assert store.get(USER).step == DialogueStep.REGISTER_ASK_LAST_NAME
        reply = await engine.process_turn(USER, "de la Rosa")
        assert "EMAIL" in reply.body
        draft = store.get(USER).data
        assert draft.first_name == "ana maría"
        assert draft.last_name == "de la Rosa"
        assert store.get(USER).step == DialogueStep.REGISTER_ASK_EMAIL

    @pytest.mark.asyncio
    async def test_email_submitted(self, engine, store, backend):
        reply = await send_all(engine, "3", "7654321", "Ana", "Rojas", "ana@example.com")
        assert isinstance(reply, TextReply)
        assert "Registro exitoso" in reply.body
        assert "Ana" in reply.body
        assert store.get(USER).is_idle

        request = backend.called("register_patient")[0][1]
        assert request.first_name == "Ana"
        assert request.last_name == "Rojas"
        assert request.ci == "7654321"
        assert request.email == "ana@example.com"
        assert request.phone == USER

    @pytest.mark.parametrize("opt_out", ["no", "NO", " No "])
    @pytest.mark.asyncio
    async def test_email_opt_out(self, engine, backend, opt_out):
        await send_all(engine, "3", "7654321", "Ana", "Rojas", opt_out)
        request = backend.called("register_patient")[0][1]
        assert request.email is None

    @pytest.mark.asyncio
    async def test_email_not_validated(self, engine, backend):
        await send_all(engine, "3", "7654321", "Ana", "Rojas", "not-an-email")
        assert backend.called("register_patient")[0][1].email == "not-an-email"

    @pytest.mark.asyncio
    async def test_backend_failure(self, engine, store, backend):
        backend.registration_result = RegistrationResult(success=False)
        reply = await send_all(engine, "3", "7654321", "Ana", "Rojas", "no")
        assert "Error al registrar" in reply.body
        assert store.get(USER).is_idle

    @pytest.mark.asyncio
    async def test_phone_is_normalised_user_id(self, engine, backend):
        await send_all(engine, "3", "7654321", "Ana", "Rojas", "no", user="+591 600-12345")
        assert backend.called("register_patient")[0][1].phone == "+59160012345"

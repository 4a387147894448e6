"""Shared test fixtures and helpers."""

from typing import Optional

import pytest

from src.conversation.dialogue_engine import DialogueEngine
from src.conversation.session_store import InMemorySessionStore
from src.schemas.backend_schema import (
    Appointment,
    BookingRequest,
    BookingResult,
    Dentist,
    DiagnosisResult,
    Patient,
    PatientCheck,
    RegistrationRequest,
    RegistrationResult,
    Service,
)

USER = "59160012345"
KNOWN_CI = "1234567"


class FakeClock:
    """Manually advanced clock for session expiry tests."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class FakeBackend:
    """Scriptable ``BackendQueryService`` that records every call."""

    def __init__(self) -> None:
        self.patients: dict[str, Patient] = {
            KNOWN_CI: Patient(id=15, first_name="Juan", last_name="Perez"),
        }
        self.services: list[Service] = [
            Service(id=1, name="Consulta General", price=100),
            Service(id=2, name="Limpieza", price=150),
        ]
        self.dentists: list[Dentist] = [Dentist(id=5, name="Dr. Roberto", specialty="Ortodoncia")]
        self.slots: list[str] = ["09:00", "10:00"]
        self.booking_result = BookingResult(success=True)
        self.registration_result = RegistrationResult(success=True)
        self.appointments: list[Appointment] = []
        self.diagnosis = DiagnosisResult(message="Resultado:")
        self.raise_on: Optional[str] = None
        self.calls: list[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if self.raise_on == name:
            raise RuntimeError(f"{name} exploded")

    def called(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    async def check_patient(self, identifier: str) -> PatientCheck:
        self._record("check_patient", identifier)
        patient = self.patients.get(identifier)
        return PatientCheck(exists=patient is not None, patient=patient)

    async def list_services(self) -> list[Service]:
        self._record("list_services")
        return list(self.services)

    async def list_dentists(self) -> list[Dentist]:
        self._record("list_dentists")
        return list(self.dentists)

    async def list_slots(self, dentist_id: int, service_id: int, date: str) -> list[str]:
        self._record("list_slots", dentist_id, service_id, date)
        return list(self.slots)

    async def book_appointment(self, request: BookingRequest) -> BookingResult:
        self._record("book_appointment", request)
        return self.booking_result

    async def register_patient(self, request: RegistrationRequest) -> RegistrationResult:
        self._record("register_patient", request)
        return self.registration_result

    async def list_appointments(self, identifier: str) -> list[Appointment]:
        self._record("list_appointments", identifier)
        return list(self.appointments)

    async def get_diagnosis(self, text: str) -> DiagnosisResult:
        self._record("get_diagnosis", text)
        return self.diagnosis


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store():
    return InMemorySessionStore(idle_ttl_seconds=0)


@pytest.fixture
def engine(backend, store):
    return DialogueEngine(backend=backend, store=store)


async def send_all(engine: DialogueEngine, *texts: str, user: str = USER):
    """Feed several messages in order and return the last reply."""
    reply = None
    for text in texts:
        reply = await engine.process_turn(user, text)
    return reply

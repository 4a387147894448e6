"""
In-memory clinic backend.

Stands in for the clinic bot API during the console demo and tests: a
small service catalogue, two dentists, a fixed daily schedule, a patient
registry, and keyword-based symptom matching. In production the
``HttpBackendClient`` talks to the real API instead.
"""

import logging
from typing import Optional

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
    SuggestedService,
)

logger = logging.getLogger(__name__)

GENERAL_CONSULTATION_ID = 1
NO_MATCH_MESSAGE = (
    "No se encontraron servicios específicos para esa descripción, "
    "te recomendamos una consulta general"
)

SERVICES: list[dict] = [
    {"id": 1, "name": "Consulta General", "price": 100},
    {"id": 2, "name": "Limpieza Dental", "price": 150},
    {"id": 3, "name": "Extracción", "price": 250},
    {"id": 4, "name": "Ortodoncia - Evaluación", "price": 200},
    {"id": 5, "name": "Blanqueamiento", "price": 400},
]

DENTISTS: list[dict] = [
    {"id": 5, "name": "Roberto Vargas", "specialty": "Ortodoncia"},
    {"id": 7, "name": "Lucía Mendoza", "specialty": "Odontología General"},
]

DAILY_SLOTS: list[str] = ["09:00", "10:00", "11:00", "15:00", "16:00"]

# Keyword -> service id. Checked in order, first hit per service wins.
SYMPTOM_KEYWORDS: dict[str, int] = {
    "sarro": 2, "limpieza": 2, "manchas": 5, "amarill": 5, "blanque": 5,
    "muela del juicio": 3, "extra": 3, "sacar": 3,
    "chueco": 4, "torcid": 4, "brackets": 4, "frenos": 4,
    "duele": 1, "dolor": 1, "sangra": 1, "encía": 1,
}


class MockClinicBackend:
    """Implements ``BackendQueryService`` over in-memory data."""

    def __init__(self, patients: Optional[dict[str, Patient]] = None) -> None:
        self._services = [Service(**s) for s in SERVICES]
        self._dentists = [Dentist(**d) for d in DENTISTS]
        self._patients: dict[str, Patient] = dict(patients) if patients is not None else {
            "1234567": Patient(id=15, first_name="Juan", last_name="Perez"),
        }
        self._phones: dict[str, str] = {}
        # (dentist_id, date) -> taken times
        self._taken: dict[tuple[int, str], set[str]] = {}
        self._appointments: dict[int, list[Appointment]] = {}
        self._next_appointment_id = 1000

    async def check_patient(self, identifier: str) -> PatientCheck:
        patient = self._patients.get(identifier.strip())
        return PatientCheck(exists=patient is not None, patient=patient)

    async def list_services(self) -> list[Service]:
        return list(self._services)

    async def list_dentists(self) -> list[Dentist]:
        return list(self._dentists)

    async def list_slots(self, dentist_id: int, service_id: int, date: str) -> list[str]:
        if not any(d.id == dentist_id for d in self._dentists):
            return []
        taken = self._taken.get((dentist_id, date), set())
        return [slot for slot in DAILY_SLOTS if slot not in taken]

    async def book_appointment(self, request: BookingRequest) -> BookingResult:
        service = self._find(self._services, request.service_id)
        dentist = self._find(self._dentists, request.dentist_id)
        if service is None or dentist is None:
            return BookingResult(success=False, message="Servicio u odontólogo inválido")

        taken = self._taken.setdefault((request.dentist_id, request.date), set())
        if request.time in taken:
            return BookingResult(success=False, message="El horario ya no está disponible")
        taken.add(request.time)

        appointment_id = self._next_appointment_id
        self._next_appointment_id += 1
        self._appointments.setdefault(request.patient_id, []).append(Appointment(
            date=f"{request.date}T00:00:00",
            time=request.time,
            service=service.name,
            dentist=dentist.name,
            status="reserved",
        ))
        logger.info(
            "Appointment %s booked for patient %s on %s at %s",
            appointment_id, request.patient_id, request.date, request.time,
        )
        return BookingResult(message="Cita reservada", appointment_id=appointment_id)

    async def register_patient(self, request: RegistrationRequest) -> RegistrationResult:
        if request.ci in self._patients:
            return RegistrationResult(success=False, message="El paciente ya existe")
        patient_id = max((p.id for p in self._patients.values()), default=0) + 1
        self._patients[request.ci] = Patient(
            id=patient_id, first_name=request.first_name, last_name=request.last_name,
        )
        self._phones[request.ci] = request.phone
        logger.info("New patient registered: %s (%s)", request.ci, patient_id)
        return RegistrationResult(success=True)

    async def list_appointments(self, identifier: str) -> list[Appointment]:
        patient = self._patients.get(identifier.strip())
        if patient is None:
            return []
        return list(self._appointments.get(patient.id, []))

    async def get_diagnosis(self, text: str) -> DiagnosisResult:
        lowered = text.lower()
        matched: list[int] = []
        for keyword, service_id in SYMPTOM_KEYWORDS.items():
            if keyword in lowered and service_id not in matched:
                matched.append(service_id)

        if not matched:
            general = self._find(self._services, GENERAL_CONSULTATION_ID)
            return DiagnosisResult(
                message=NO_MATCH_MESSAGE,
                suggested_services=[SuggestedService(**general.model_dump())],
            )
        suggestions = [
            SuggestedService(**self._find(self._services, sid).model_dump()) for sid in matched
        ]
        return DiagnosisResult(
            message="Según tu descripción, estos servicios pueden ayudarte:",
            suggested_services=suggestions,
        )

    @staticmethod
    def _find(items, item_id):
        return next((item for item in items if item.id == item_id), None)

"""Per-user dialogue state and the flow-scoped working sets."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from src.schemas.backend_schema import Dentist, Service


class DialogueStep(str, Enum):
    """Every position a user can be at in the dialogue."""
    IDLE = "idle"

    BOOKING_ASK_CI = "booking_ask_ci"
    BOOKING_SELECT_SERVICE = "booking_select_service"
    BOOKING_SELECT_DENTIST = "booking_select_dentist"
    BOOKING_SELECT_DATE = "booking_select_date"
    BOOKING_SELECT_SLOT = "booking_select_slot"

    REGISTER_ASK_CI = "register_ask_ci"
    REGISTER_ASK_FIRST_NAME = "register_ask_first_name"
    REGISTER_ASK_LAST_NAME = "register_ask_last_name"
    REGISTER_ASK_EMAIL = "register_ask_email"

    LOOKUP_ASK_CI = "lookup_ask_ci"

    DIAGNOSIS_ASK_SYMPTOM = "diagnosis_ask_symptom"


@dataclass
class BookingDraft:
    """
    Working set of the booking flow.

    Each field is written by the step that collects it; later steps only
    read fields their predecessors have filled.
    """
    patient_id: Optional[int] = None
    patient_name: Optional[str] = None
    patient_first_name: Optional[str] = None
    available_services: list[Service] = field(default_factory=list)
    service_id: Optional[int] = None
    service_name: Optional[str] = None
    available_dentists: list[Dentist] = field(default_factory=list)
    dentist_id: Optional[int] = None
    dentist_name: Optional[str] = None
    date: Optional[str] = None
    available_slots: list[str] = field(default_factory=list)


@dataclass
class RegistrationDraft:
    """Working set of the registration flow."""
    ci: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


FlowData = Union[BookingDraft, RegistrationDraft]


@dataclass
class Session:
    """
    One user's dialogue position plus the data of the flow in progress.

    ``data`` is ``None`` while idle and for flows that carry nothing
    between turns (lookup, diagnosis).
    """
    step: DialogueStep = DialogueStep.IDLE
    data: Optional[FlowData] = None
    touched_at: float = 0.0

    @property
    def is_idle(self) -> bool:
        return self.step == DialogueStep.IDLE and self.data is None

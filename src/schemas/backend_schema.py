"""Clinic backend data models: patients, catalogue, schedule, and results."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# The backend serialises prices as numbers or decimal strings
Price = Union[int, float, str]


class Patient(BaseModel):
    """Patient record returned by the identity check."""
    id: int
    first_name: str
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class PatientCheck(BaseModel):
    """Result of looking a patient up by identity document (CI)."""
    exists: bool = False
    patient: Optional[Patient] = None

    @property
    def found(self) -> bool:
        return self.exists and self.patient is not None


class Service(BaseModel):
    """Bookable dental service."""
    id: int
    name: str
    price: Optional[Price] = None


class Dentist(BaseModel):
    """Practitioner available for booking."""
    id: int
    name: str
    specialty: str = ""


class Appointment(BaseModel):
    """Upcoming appointment as listed for a patient."""
    date: str = ""
    time: str = ""
    service: str = ""
    dentist: str = ""
    status: str = ""


class BookingRequest(BaseModel):
    """Validated booking request data."""
    patient_id: int
    dentist_id: int
    service_id: int
    date: str
    time: str
    notes: str = ""


class BookingResult(BaseModel):
    """Booking creation result.

    ``confirmed`` is the only success check: an explicit ``success`` flag
    or an ``appointment_id``. A bare ``message`` does not count, since the
    backend also attaches messages to rejections.
    """
    model_config = ConfigDict(extra="allow")

    success: Optional[bool] = None
    appointment_id: Optional[Union[int, str]] = None
    message: Optional[str] = None

    @property
    def confirmed(self) -> bool:
        return self.success is True or self.appointment_id is not None


class RegistrationRequest(BaseModel):
    """New patient registration payload."""
    first_name: str
    last_name: str
    ci: str
    email: Optional[str] = None
    phone: str


class RegistrationResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    message: Optional[str] = None


class SuggestedService(BaseModel):
    """Service proposed by the symptom diagnosis."""
    id: Optional[int] = None
    name: str
    price: Optional[Price] = None


class DiagnosisResult(BaseModel):
    """Symptom-to-service suggestion from the backend."""
    message: Optional[str] = None
    suggested_services: list[SuggestedService] = Field(default_factory=list)

    @field_validator("suggested_services", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

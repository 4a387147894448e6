"""
Clinic backend contract and its HTTP implementation.

The dialogue engine only sees ``BackendQueryService``. ``HttpBackendClient``
talks to the clinic's bot API and never raises on transport or payload
problems: every call site degrades to a safe default (not found, empty
list, explicit failure) and logs what went wrong.
"""

from typing import Any, Optional, Protocol

import httpx
from pydantic import ValidationError

from src.config import settings
from src.logging_context import get_conversation_logger
from src.schemas.backend_schema import (
    Appointment,
    BookingRequest,
    BookingResult,
    Dentist,
    DiagnosisResult,
    PatientCheck,
    RegistrationRequest,
    RegistrationResult,
    Service,
)

logger = get_conversation_logger(__name__)

DIAGNOSIS_EMPTY_MESSAGE = "Sin respuesta de IA"
DIAGNOSIS_ERROR_MESSAGE = "Error al consultar IA"


class BackendQueryService(Protocol):
    """Domain data the dialogue engine needs from the clinic backend."""

    async def check_patient(self, identifier: str) -> PatientCheck: ...

    async def list_services(self) -> list[Service]: ...

    async def list_dentists(self) -> list[Dentist]: ...

    async def list_slots(self, dentist_id: int, service_id: int, date: str) -> list[str]: ...

    async def book_appointment(self, request: BookingRequest) -> BookingResult: ...

    async def register_patient(self, request: RegistrationRequest) -> RegistrationResult: ...

    async def list_appointments(self, identifier: str) -> list[Appointment]: ...

    async def get_diagnosis(self, text: str) -> DiagnosisResult: ...


class _Unavailable(Exception):
    """Internal marker: the request produced no usable JSON body."""


class HttpBackendClient:
    """httpx-based client for the clinic bot API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        timeout = timeout_seconds or settings.backend.timeout_seconds
        self.base_url = (base_url or settings.backend.base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpBackendClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    async def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        """Send a request and return the decoded JSON body.

        Non-2xx statuses are logged but their body is still returned, since
        the API reports "not found" style answers with error statuses.
        """
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Network error [%s %s]: %s", method, path, exc)
            raise _Unavailable(path) from exc

        if response.status_code >= 300:
            logger.error(
                "API error [%s %s]: %s %s",
                method, path, response.status_code, response.text[:500],
            )
        try:
            return response.json()
        except ValueError:
            logger.error("Non-JSON body from %s (status %s)", path, response.status_code)
            raise _Unavailable(path) from None

    # ------------------------------------------------------------------ #
    # Calls
    # ------------------------------------------------------------------ #

    async def check_connection(self) -> bool:
        """Probe the catalogue endpoint to confirm the API is reachable."""
        try:
            response = await self._client.get("/services")
        except httpx.HTTPError as exc:
            logger.error("API connection to %s failed: %s", self.base_url, exc)
            return False
        logger.info("API connection OK (%s, status %s)", self.base_url, response.status_code)
        return response.status_code < 500

    async def check_patient(self, identifier: str) -> PatientCheck:
        try:
            body = await self._request("POST", "/check-patient", {"identifier": identifier})
            return PatientCheck.model_validate(body)
        except (_Unavailable, ValidationError) as exc:
            logger.warning("check_patient fell back to not-found: %s", exc)
            return PatientCheck(exists=False)

    async def list_services(self) -> list[Service]:
        return await self._list("GET", "/services", None, None, Service)

    async def list_dentists(self) -> list[Dentist]:
        return await self._list("GET", "/dentists", None, None, Dentist)

    async def list_slots(self, dentist_id: int, service_id: int, date: str) -> list[str]:
        payload = {"dentist_id": dentist_id, "service_id": service_id, "date": date}
        try:
            body = await self._request("POST", "/slots", payload)
        except _Unavailable:
            return []
        slots = body.get("slots") if isinstance(body, dict) else None
        if not isinstance(slots, list):
            logger.warning("Slots payload without a 'slots' list: %r", body)
            return []
        return [str(slot) for slot in slots]

    async def book_appointment(self, request: BookingRequest) -> BookingResult:
        try:
            body = await self._request("POST", "/book", request.model_dump())
            result = BookingResult.model_validate(body)
        except (_Unavailable, ValidationError) as exc:
            logger.warning("book_appointment fell back to failure: %s", exc)
            return BookingResult(success=False)
        logger.info("Booking result: %s", result.model_dump())
        return result

    async def register_patient(self, request: RegistrationRequest) -> RegistrationResult:
        try:
            body = await self._request("POST", "/register", request.model_dump())
            return RegistrationResult.model_validate(body)
        except (_Unavailable, ValidationError) as exc:
            logger.warning("register_patient fell back to failure: %s", exc)
            return RegistrationResult(success=False)

    async def list_appointments(self, identifier: str) -> list[Appointment]:
        return await self._list(
            "POST", "/my-appointments", {"identifier": identifier}, "appointments", Appointment,
        )

    async def get_diagnosis(self, text: str) -> DiagnosisResult:
        logger.debug("Sending symptom description to diagnosis: %r", text)
        try:
            body = await self._request("POST", "/diagnosis", {"text": text})
        except _Unavailable:
            return DiagnosisResult(message=DIAGNOSIS_ERROR_MESSAGE)
        if not body:
            return DiagnosisResult(message=DIAGNOSIS_EMPTY_MESSAGE)
        try:
            return DiagnosisResult.model_validate(body)
        except ValidationError as exc:
            logger.warning("Malformed diagnosis payload: %s", exc)
            return DiagnosisResult(message=DIAGNOSIS_ERROR_MESSAGE)

    async def _list(self, method, path, payload, key, model):
        """Fetch a list endpoint, optionally wrapped under ``key``; ``[]`` on any fault."""
        try:
            body = await self._request(method, path, payload)
        except _Unavailable:
            return []
        items = body.get(key) if key and isinstance(body, dict) else body
        if not isinstance(items, list):
            logger.warning("Expected a list from %s, got %s", path, type(items).__name__)
            return []
        try:
            return [model.model_validate(item) for item in items]
        except ValidationError as exc:
            logger.warning("Malformed item in %s: %s", path, exc)
            return []

"""
Session-driven dialogue engine.

Routes each inbound chat message through the user's current step and
returns a structured reply. Four flows start from the main menu:

    1  booking       CI -> service -> dentist -> date -> slot -> book
    2  lookup        CI -> list upcoming appointments
    3  registration  CI -> first name -> last name -> email -> register
    4  diagnosis     symptom text -> suggested services

Every flow ends back in IDLE with an empty working set. Validation
failures re-prompt without moving; unexpected errors are caught once per
turn, reset the session, and produce an apology.

Usage:
    engine = DialogueEngine(backend=HttpBackendClient())
    reply = await engine.process_turn("59160012345", "1")
"""

from typing import Awaitable, Callable, Optional, TypeVar

from src.config import settings
from src.conversation.session_store import InMemorySessionStore
from src.logging_context import get_conversation_logger, set_conversation_id
from src.prompts import messages
from src.prompts.reply_templates import (
    build_appointments_text,
    build_booking_confirmation,
    build_diagnosis_text,
    dentist_rows,
    service_rows,
    slot_rows,
    with_cancel,
    with_list,
)
from src.schemas.backend_schema import BookingRequest, Dentist, RegistrationRequest, Service
from src.schemas.reply_schema import Reply, ShowMenu, TextReply
from src.schemas.session_schema import (
    BookingDraft,
    DialogueStep,
    FlowData,
    RegistrationDraft,
    Session,
)
from src.tools.backend import BackendQueryService
from src.utils import is_date_shaped, is_digits, normalize_command, normalize_phone

logger = get_conversation_logger(__name__)

D = TypeVar("D", BookingDraft, RegistrationDraft)
StepHandler = Callable[[str, Session, str], Awaitable[Reply]]

CANCEL_COMMANDS = frozenset({"cancelar", "menu"})


class SessionDataError(Exception):
    """Raised when a step finds a working set that belongs to another flow."""


class DialogueEngine:
    """
    Per-user state machine over ``DialogueStep``.

    The handler table is checked at construction to cover every step, so
    adding a step without a handler fails immediately rather than on the
    first user who reaches it.
    """

    # option -> (entry step, prompt, working-set factory)
    MENU_ROUTES: dict[str, tuple[DialogueStep, str, Optional[Callable[[], FlowData]]]] = {
        "1": (DialogueStep.BOOKING_ASK_CI, messages.BOOKING_ASK_CI, BookingDraft),
        "2": (DialogueStep.LOOKUP_ASK_CI, messages.LOOKUP_ASK_CI, None),
        "3": (DialogueStep.REGISTER_ASK_CI, messages.REGISTER_ASK_CI, RegistrationDraft),
        "4": (DialogueStep.DIAGNOSIS_ASK_SYMPTOM, messages.DIAGNOSIS_ASK_SYMPTOM, None),
    }

    def __init__(
        self,
        backend: BackendQueryService,
        store: Optional[InMemorySessionStore] = None,
    ) -> None:
        self._backend = backend
        self._store = store if store is not None else InMemorySessionStore()
        self._handlers: dict[DialogueStep, StepHandler] = {
            DialogueStep.IDLE: self._handle_idle,
            DialogueStep.BOOKING_ASK_CI: self._handle_booking_ask_ci,
            DialogueStep.BOOKING_SELECT_SERVICE: self._handle_booking_select_service,
            DialogueStep.BOOKING_SELECT_DENTIST: self._handle_booking_select_dentist,
            DialogueStep.BOOKING_SELECT_DATE: self._handle_booking_select_date,
            DialogueStep.BOOKING_SELECT_SLOT: self._handle_booking_select_slot,
            DialogueStep.REGISTER_ASK_CI: self._handle_register_ask_ci,
            DialogueStep.REGISTER_ASK_FIRST_NAME: self._handle_register_first_name,
            DialogueStep.REGISTER_ASK_LAST_NAME: self._handle_register_last_name,
            DialogueStep.REGISTER_ASK_EMAIL: self._handle_register_email,
            DialogueStep.LOOKUP_ASK_CI: self._handle_lookup_ask_ci,
            DialogueStep.DIAGNOSIS_ASK_SYMPTOM: self._handle_diagnosis,
        }
        missing = [step.value for step in DialogueStep if step not in self._handlers]
        if missing:
            raise RuntimeError(f"Dialogue steps without a handler: {missing}")

    @property
    def store(self) -> InMemorySessionStore:
        return self._store

    async def process_turn(self, user_id: str, raw_text: str) -> Reply:
        """
        Handle one inbound message and return the reply to send.

        Never raises: any failure inside a step resets the session and
        yields a generic apology.
        """
        set_conversation_id(user_id)
        async with self._store.lock(user_id):
            session = self._store.get(user_id)
            msg = raw_text.strip()

            if normalize_command(msg) in CANCEL_COMMANDS:
                self._store.reset(user_id)
                logger.info("Session reset by '%s' command", normalize_command(msg))
                return ShowMenu()

            try:
                return await self._dispatch(user_id, session, msg)
            except Exception:
                logger.exception("Unhandled error at step %s", session.step)
                self._store.reset(user_id)
                return TextReply(body=messages.UNEXPECTED_ERROR)

    async def _dispatch(self, user_id: str, session: Session, msg: str) -> Reply:
        handler = self._handlers.get(session.step)
        if handler is None:
            logger.warning("Unrecognised step %r, resetting session", session.step)
            self._store.reset(user_id)
            return ShowMenu()

        previous = session.step
        reply = await handler(user_id, session, msg)
        current = self._store.get(user_id).step
        if current != previous:
            logger.debug("Step transition: %s -> %s", previous.value, current.value)
        return reply

    def _finish(self, user_id: str) -> None:
        """End the current flow: back to IDLE with an empty working set."""
        self._store.reset(user_id)

    @staticmethod
    def _draft(session: Session, kind: type[D]) -> D:
        if not isinstance(session.data, kind):
            raise SessionDataError(
                f"Step {session.step.value} expects {kind.__name__}, "
                f"found {type(session.data).__name__}"
            )
        return session.data

    # ------------------------------------------------------------------ #
    # Main menu
    # ------------------------------------------------------------------ #

    async def _handle_idle(self, user_id: str, session: Session, msg: str) -> Reply:
        route = self.MENU_ROUTES.get(msg)
        if route is None:
            return ShowMenu()
        step, prompt, draft_factory = route
        session.step = step
        session.data = draft_factory() if draft_factory is not None else None
        return with_cancel(prompt)

    # ------------------------------------------------------------------ #
    # Booking flow
    # ------------------------------------------------------------------ #

    async def _handle_booking_ask_ci(self, user_id: str, session: Session, msg: str) -> Reply:
        check = await self._backend.check_patient(msg)
        if not check.found:
            self._finish(user_id)
            return TextReply(body=messages.PATIENT_NOT_FOUND_BOOKING)

        draft = self._draft(session, BookingDraft)
        patient = check.patient
        draft.patient_id = patient.id
        draft.patient_name = patient.full_name
        draft.patient_first_name = patient.first_name

        services = await self._backend.list_services()
        if not services:
            logger.warning("Service catalogue empty or unavailable, aborting booking")
            self._finish(user_id)
            return TextReply(body=messages.SERVICES_UNAVAILABLE)

        draft.available_services = services
        session.step = DialogueStep.BOOKING_SELECT_SERVICE
        return with_list(
            messages.SERVICES_GREETING.format(first_name=patient.first_name),
            messages.SERVICES_TITLE,
            messages.SERVICES_ACTION,
            messages.SERVICES_SECTION,
            service_rows(services),
        )

    async def _handle_booking_select_service(
        self, user_id: str, session: Session, msg: str
    ) -> Reply:
        draft = self._draft(session, BookingDraft)
        service = match_service(draft.available_services, msg)
        if service is None:
            return with_cancel(messages.INVALID_SERVICE)

        draft.service_id = service.id
        draft.service_name = service.name

        dentists = await self._backend.list_dentists()
        draft.available_dentists = dentists
        session.step = DialogueStep.BOOKING_SELECT_DENTIST
        return with_list(
            messages.SERVICE_CHOSEN.format(service_name=service.name),
            messages.DENTISTS_TITLE,
            messages.DENTISTS_ACTION,
            messages.DENTISTS_SECTION,
            dentist_rows(dentists),
        )

    async def _handle_booking_select_dentist(
        self, user_id: str, session: Session, msg: str
    ) -> Reply:
        draft = self._draft(session, BookingDraft)
        dentist = match_dentist(draft.available_dentists, msg)
        if dentist is None:
            return with_cancel(messages.INVALID_DENTIST)

        draft.dentist_id = dentist.id
        draft.dentist_name = dentist.name
        session.step = DialogueStep.BOOKING_SELECT_DATE
        return with_cancel(messages.ASK_DATE.format(dentist_name=dentist.name))

    async def _handle_booking_select_date(
        self, user_id: str, session: Session, msg: str
    ) -> Reply:
        draft = self._draft(session, BookingDraft)
        if not is_date_shaped(msg):
            return with_cancel(messages.INVALID_DATE)

        slots = await self._backend.list_slots(draft.dentist_id, draft.service_id, msg)
        if not slots:
            return with_cancel(messages.NO_SLOTS)

        draft.date = msg
        draft.available_slots = slots
        session.step = DialogueStep.BOOKING_SELECT_SLOT
        return with_list(
            messages.SLOTS_INTRO.format(date=msg),
            messages.SLOTS_TITLE,
            messages.SLOTS_ACTION,
            messages.SLOTS_SECTION,
            slot_rows(slots),
        )

    async def _handle_booking_select_slot(
        self, user_id: str, session: Session, msg: str
    ) -> Reply:
        draft = self._draft(session, BookingDraft)
        if msg not in draft.available_slots:
            return with_cancel(messages.INVALID_SLOT)

        request = BookingRequest(
            patient_id=draft.patient_id,
            dentist_id=draft.dentist_id,
            service_id=draft.service_id,
            date=draft.date,
            time=msg,
            notes=settings.clinic.booking_note,
        )
        result = await self._backend.book_appointment(request)
        self._finish(user_id)

        if not result.confirmed:
            logger.warning("Booking rejected: %s", result.model_dump())
            return TextReply(body=messages.BOOKING_FAILED)
        logger.info("Booked %s for %s with %s on %s at %s",
                    draft.service_name, draft.patient_name, draft.dentist_name, draft.date, msg)
        return TextReply(body=build_booking_confirmation(
            draft.patient_first_name, draft.service_name, draft.dentist_name, draft.date, msg,
        ))

    # ------------------------------------------------------------------ #
    # Registration flow
    # ------------------------------------------------------------------ #

    async def _handle_register_ask_ci(self, user_id: str, session: Session, msg: str) -> Reply:
        if not is_digits(msg):
            return with_cancel(messages.INVALID_CI)

        check = await self._backend.check_patient(msg)
        if check.found:
            self._finish(user_id)
            return TextReply(body=messages.ALREADY_REGISTERED.format(
                full_name=check.patient.full_name,
            ))

        draft = self._draft(session, RegistrationDraft)
        draft.ci = msg
        session.step = DialogueStep.REGISTER_ASK_FIRST_NAME
        return with_cancel(messages.ASK_FIRST_NAME)

    async def _handle_register_first_name(
        self, user_id: str, session: Session, msg: str
    ) -> Reply:
        self._draft(session, RegistrationDraft).first_name = msg
        session.step = DialogueStep.REGISTER_ASK_LAST_NAME
        return with_cancel(messages.ASK_LAST_NAME)

    async def _handle_register_last_name(
        self, user_id: str, session: Session, msg: str
    ) -> Reply:
        self._draft(session, RegistrationDraft).last_name = msg
        session.step = DialogueStep.REGISTER_ASK_EMAIL
        return with_cancel(messages.ASK_EMAIL)

    async def _handle_register_email(self, user_id: str, session: Session, msg: str) -> Reply:
        draft = self._draft(session, RegistrationDraft)
        email = None if normalize_command(msg) == messages.EMAIL_OPT_OUT else msg

        request = RegistrationRequest(
            first_name=draft.first_name,
            last_name=draft.last_name,
            ci=draft.ci,
            email=email,
            phone=normalize_phone(user_id) or user_id,
        )
        result = await self._backend.register_patient(request)
        self._finish(user_id)

        if result.success:
            logger.info("Patient %s registered", draft.ci)
            return TextReply(body=messages.REGISTRATION_OK.format(first_name=draft.first_name))
        return TextReply(body=messages.REGISTRATION_FAILED)

    # ------------------------------------------------------------------ #
    # Lookup & diagnosis
    # ------------------------------------------------------------------ #

    async def _handle_lookup_ask_ci(self, user_id: str, session: Session, msg: str) -> Reply:
        check = await self._backend.check_patient(msg)
        if not check.found:
            self._finish(user_id)
            return TextReply(body=messages.PATIENT_NOT_FOUND_LOOKUP)

        appointments = await self._backend.list_appointments(msg)
        self._finish(user_id)
        return TextReply(body=build_appointments_text(check.patient.first_name, appointments))

    async def _handle_diagnosis(self, user_id: str, session: Session, msg: str) -> Reply:
        result = await self._backend.get_diagnosis(msg)
        self._finish(user_id)
        return TextReply(body=build_diagnosis_text(result))


def match_service(services: list[Service], text: str) -> Optional[Service]:
    """Resolve a selection by exact numeric id, then by case-insensitive name substring."""
    if is_digits(text):
        wanted = int(text)
        for service in services:
            if service.id == wanted:
                return service
    needle = text.casefold()
    if not needle:
        return None
    return next((s for s in services if needle in s.name.casefold()), None)


def match_dentist(dentists: list[Dentist], text: str) -> Optional[Dentist]:
    """Resolve a selection by exact numeric id only."""
    if not is_digits(text):
        return None
    wanted = int(text)
    return next((d for d in dentists if d.id == wanted), None)

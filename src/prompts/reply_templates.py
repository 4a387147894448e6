"""Reply construction and formatting helpers for the dialogue engine."""

from typing import Optional

from src.config import settings
from src.prompts import messages
from src.schemas.backend_schema import Appointment, Dentist, DiagnosisResult, Price, Service
from src.schemas.reply_schema import (
    Button,
    ButtonPrompt,
    ListRow,
    ListSection,
    Reply,
    SelectableList,
    ShowMenu,
    TextReply,
)

# Tapping the button sends its id, which the global cancel rule recognises
CANCEL_BUTTON = Button(id="cancelar", label=messages.CANCEL_BUTTON_LABEL)


def with_cancel(body: str, title: Optional[str] = None) -> ButtonPrompt:
    """Wrap a prompt with the cancel affordance."""
    return ButtonPrompt(
        body=body,
        title=title or settings.clinic.bot_title,
        buttons=[CANCEL_BUTTON],
    )


def with_list(
    body: str, title: str, action_label: str, section_title: str, rows: list[ListRow]
) -> SelectableList:
    """Single-section selectable list."""
    return SelectableList(
        body=body,
        title=title,
        action_label=action_label,
        sections=[ListSection(title=section_title, rows=rows)],
    )


def format_price(price: Optional[Price]) -> str:
    if price is None:
        return messages.DIAGNOSIS_PRICE_UNKNOWN
    return f"${price}"


def service_rows(services: list[Service]) -> list[ListRow]:
    return [
        ListRow(row_id=str(s.id), label=s.name, subtitle=format_price(s.price))
        for s in services
    ]


def dentist_rows(dentists: list[Dentist]) -> list[ListRow]:
    return [ListRow(row_id=str(d.id), label=d.name, subtitle=d.specialty) for d in dentists]


def slot_rows(slots: list[str]) -> list[ListRow]:
    return [ListRow(row_id=slot, label=slot, subtitle=messages.SLOT_SUBTITLE) for slot in slots]


def build_booking_confirmation(
    first_name: str, service_name: str, dentist_name: str, date: str, time: str
) -> str:
    """Confirmation text built from what the user picked, not from the backend echo."""
    return messages.BOOKING_CONFIRMED.format(
        first_name=first_name, service_name=service_name,
        dentist_name=dentist_name, date=date, time=time,
    )


def translate_status(status: str) -> str:
    """Map backend status codes to Spanish; unknown codes pass through."""
    return messages.APPOINTMENT_STATUS.get(status, status)


def build_appointments_text(first_name: str, appointments: list[Appointment]) -> str:
    """Multi-line summary of a patient's upcoming appointments."""
    if not appointments:
        return messages.NO_APPOINTMENTS.format(first_name=first_name)

    text = messages.APPOINTMENTS_HEADER.format(first_name=first_name)
    for appointment in appointments:
        text += messages.APPOINTMENT_BLOCK.format(
            # Backend may send a full ISO datetime
            date=appointment.date.split("T")[0],
            time=appointment.time,
            service=appointment.service,
            dentist=appointment.dentist,
            status=translate_status(appointment.status),
        )
    return text


def build_diagnosis_text(result: DiagnosisResult) -> str:
    """Compose the diagnosis reply: lead message, one line per suggestion, booking hint."""
    suggestions = result.suggested_services
    message = result.message or messages.DIAGNOSIS_DEFAULT

    if messages.DIAGNOSIS_NO_MATCH_MARKER in message and suggestions:
        message = messages.DIAGNOSIS_GENERAL_SUGGESTION

    text = f"🤖 {message}\n"
    if suggestions:
        for service in suggestions:
            text += f"\n✨ *{service.name}* ({format_price(service.price)})"
        text += f"\n\n{messages.DIAGNOSIS_BOOKING_HINT}"
    return text


def build_menu_text() -> str:
    """Top-level menu shown whenever the engine answers ``ShowMenu``."""
    return messages.MENU_WELCOME.format(clinic_name=settings.clinic.name) + messages.MENU_OPTIONS


def render_list_as_text(reply: SelectableList) -> str:
    """Numbered plain-text version of a list, for gateways that cannot render lists."""
    lines = "\n"
    for section in reply.sections:
        if section.title:
            lines += f"\n📌 *{section.title}*\n"
        for row in section.rows:
            lines += f"🔹 [{row.row_id}] *{row.label}*\n      _{row.subtitle}_\n"
    return messages.LIST_FALLBACK_HEADER + lines


def render_reply_as_text(reply: Reply) -> str:
    """Flatten any reply into the text a plain chat channel would show."""
    if isinstance(reply, ShowMenu):
        return build_menu_text()
    if isinstance(reply, TextReply):
        return reply.body
    if isinstance(reply, ButtonPrompt):
        labels = " | ".join(f"[{b.label}]" for b in reply.buttons)
        return f"{reply.body}\n{labels}" if labels else reply.body
    if isinstance(reply, SelectableList):
        return f"{reply.body}\n{render_list_as_text(reply)}"
    raise TypeError(f"Unknown reply type: {type(reply).__name__}")

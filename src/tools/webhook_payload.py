"""
Inbound message extraction for Evolution-style WhatsApp webhooks.

The gateway posts several envelope shapes (``data.message``,
``data.messages[0]``, or the message at the top level). This module pulls
out the sender number and the text the dialogue engine should see,
including the ids of tapped buttons and list rows. Delivery and secret
verification belong to the transport layer and are not handled here.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class InboundMessage:
    """Sender and text of one inbound chat message."""
    number: str
    text: str
    remote_jid: str


def jid_to_number(jid: Any) -> Optional[str]:
    """``59160012345@s.whatsapp.net`` -> ``59160012345``."""
    if not jid or not isinstance(jid, str):
        return None
    return jid.split("@", 1)[0]


def _dig(obj: Any, *path: Any) -> Any:
    """Walk nested dicts/lists, returning None at the first missing hop."""
    for key in path:
        if isinstance(key, int):
            if not isinstance(obj, list) or len(obj) <= key:
                return None
        elif not isinstance(obj, dict):
            return None
        obj = obj[key] if isinstance(key, int) else obj.get(key)
    return obj


def _envelope(payload: dict) -> dict:
    return payload if payload.get("data") else {"data": payload}


def _first_message(payload: dict) -> Any:
    env = _envelope(payload)
    return (
        _dig(env, "data", "message")
        or _dig(env, "data", "messages", 0)
        or payload.get("message")
        or _dig(payload, "messages", 0)
    )


def is_from_me(payload: dict) -> bool:
    """True for echoes of messages the bot itself sent."""
    env = _envelope(payload)
    msg = _first_message(payload)
    return bool(
        _dig(env, "data", "key", "fromMe")
        or _dig(msg, "key", "fromMe")
        or _dig(msg, "fromMe")
    )


def get_remote_jid(payload: dict) -> Optional[str]:
    env = _envelope(payload)
    msg = _first_message(payload)
    return (
        _dig(env, "data", "key", "remoteJidAlt")
        or _dig(env, "data", "key", "remoteJid")
        or _dig(msg, "key", "remoteJid")
        or _dig(msg, "remoteJid")
        or payload.get("remoteJid")
    )


def extract_text(payload: dict) -> Optional[str]:
    """Typed text or captions first, then the id/title of a tapped button or list row."""
    msg = _first_message(payload)
    content = _dig(msg, "message") or msg

    text = (
        _dig(content, "conversation")
        or _dig(content, "extendedTextMessage", "text")
        or _dig(content, "imageMessage", "caption")
        or _dig(content, "videoMessage", "caption")
    )
    if text:
        return text
    return (
        _dig(content, "buttonsResponseMessage", "selectedButtonId")
        or _dig(content, "buttonsResponseMessage", "selectedDisplayText")
        or _dig(content, "listResponseMessage", "singleSelectReply", "selectedRowId")
        or _dig(content, "listResponseMessage", "singleSelectReply", "title")
    )


def extract_inbound_message(payload: Any) -> Optional[InboundMessage]:
    """Return the message to process, or None for echoes and contentless events."""
    if not isinstance(payload, dict) or is_from_me(payload):
        return None
    remote_jid = get_remote_jid(payload)
    number = jid_to_number(remote_jid)
    text = extract_text(payload)
    if not number or not text:
        return None
    return InboundMessage(number=number, text=text, remote_jid=remote_jid)

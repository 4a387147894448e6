from src.conversation.dialogue_engine import DialogueEngine, SessionDataError
from src.conversation.session_store import InMemorySessionStore
from src.schemas.session_schema import DialogueStep, Session

__all__ = [
    "DialogueEngine",
    "DialogueStep",
    "InMemorySessionStore",
    "Session",
    "SessionDataError",
]

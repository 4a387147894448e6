"""Reply payloads produced by the dialogue engine.

Each reply is independent of any messaging gateway; the transport layer
decides how a button prompt or selectable list is actually delivered.
"""

from typing import Literal, Union

from pydantic import BaseModel, Field


class Button(BaseModel):
    """Single reply button."""
    id: str
    label: str


class ListRow(BaseModel):
    """Selectable row inside a list section."""
    row_id: str
    label: str
    subtitle: str = ""


class ListSection(BaseModel):
    title: str
    rows: list[ListRow] = Field(default_factory=list)


class TextReply(BaseModel):
    """Plain text message."""
    kind: Literal["text"] = "text"
    body: str


class ButtonPrompt(BaseModel):
    """Text followed by a small set of action buttons."""
    kind: Literal["buttons"] = "buttons"
    body: str
    title: str
    buttons: list[Button] = Field(default_factory=list)


class SelectableList(BaseModel):
    """Text followed by a list the user picks one row from."""
    kind: Literal["list"] = "list"
    body: str
    title: str
    action_label: str
    sections: list[ListSection] = Field(default_factory=list)

    def row_ids(self) -> list[str]:
        return [row.row_id for section in self.sections for row in section.rows]


class ShowMenu(BaseModel):
    """Sentinel: nothing specific to say, present the top-level menu."""
    kind: Literal["menu"] = "menu"


Reply = Union[TextReply, ButtonPrompt, SelectableList, ShowMenu]

"""Pydantic schemas shared by the board controller and the API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ListColumnSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    order: int


class TicketSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str = ""
    list_id: str
    order: int
    created_at: datetime


class DropEvent(BaseModel):
    """Result of a drag-and-drop gesture."""

    source_list_id: str
    target_list_id: str
    # Out-of-range indices are absorbed by the board, not rejected here
    source_index: int
    target_index: int


class BoardSchema(BaseModel):
    lists: list[ListColumnSchema]
    tickets_by_list: dict[str, list[TicketSchema]]


class CreateTicketRequest(BaseModel):
    list_id: str
    title: str
    description: str = ""


class UpdateTicketRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class ReorderTicketsRequest(BaseModel):
    ticket_ids: list[int]

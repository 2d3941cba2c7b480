"""Board API routes."""

from fastapi import APIRouter, HTTPException, Depends

from ..exceptions import ReferentialError, StoreError
from ..schemas import (
    BoardSchema,
    CreateTicketRequest,
    DropEvent,
    ReorderTicketsRequest,
    TicketSchema,
    UpdateTicketRequest,
)
from ..services.board import BoardController, get_board_controller


router = APIRouter(prefix="/api/board", tags=["board"])


def _raise_for(error: Exception) -> None:
    if isinstance(error, ReferentialError):
        raise HTTPException(status_code=404, detail=str(error))
    raise HTTPException(status_code=503, detail="Storage unavailable")


@router.get("", response_model=BoardSchema)
async def get_board(board: BoardController = Depends(get_board_controller)):
    """Get lists and their tickets in display order."""
    return board.projection.to_schema()


@router.post("/tickets", response_model=BoardSchema)
async def add_ticket(
    request: CreateTicketRequest,
    board: BoardController = Depends(get_board_controller),
):
    """Append a ticket to a list. A blank title leaves the board unchanged."""
    try:
        await board.add_ticket(request.list_id, request.title, request.description)
    except (ReferentialError, StoreError) as e:
        _raise_for(e)
    return board.projection.to_schema()


@router.put("/tickets/{ticket_id}", response_model=TicketSchema)
async def update_ticket(
    ticket_id: int,
    request: UpdateTicketRequest,
    board: BoardController = Depends(get_board_controller),
):
    """Update a ticket's title or description."""
    try:
        ticket = await board.update_ticket(ticket_id, request.model_dump(exclude_none=True))
    except StoreError as e:
        _raise_for(e)

    if ticket is None:
        raise HTTPException(status_code=404, detail="Ticket not found")

    return ticket


@router.delete("/tickets/{ticket_id}", response_model=BoardSchema)
async def delete_ticket(
    ticket_id: int,
    board: BoardController = Depends(get_board_controller),
):
    """Delete a ticket. Deleting a missing ticket succeeds."""
    try:
        await board.delete_ticket(ticket_id)
    except StoreError as e:
        _raise_for(e)
    return board.projection.to_schema()


@router.post("/move", response_model=BoardSchema)
async def move_ticket(
    request: DropEvent,
    board: BoardController = Depends(get_board_controller),
):
    """Apply a drag-and-drop result."""
    try:
        await board.move_ticket(request)
    except (ReferentialError, StoreError) as e:
        _raise_for(e)
    return board.projection.to_schema()


@router.post("/lists/{list_id}/reorder", response_model=BoardSchema)
async def reorder_tickets(
    list_id: str,
    request: ReorderTicketsRequest,
    board: BoardController = Depends(get_board_controller),
):
    """Reorder a list by providing the new order of ticket IDs."""
    try:
        await board.reorder_tickets(list_id, request.ticket_ids)
    except (ReferentialError, StoreError) as e:
        _raise_for(e)
    return board.projection.to_schema()

"""Services for the task board."""

from .board import (
    BoardController,
    BoardProjection,
    DEFAULT_LISTS,
    create_board_controller,
    get_board_controller,
    set_board_controller,
)

__all__ = [
    "BoardController",
    "BoardProjection",
    "DEFAULT_LISTS",
    "create_board_controller",
    "get_board_controller",
    "set_board_controller",
]

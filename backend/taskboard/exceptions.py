"""Exceptions raised by the task board core."""


class TaskBoardError(Exception):
    """Base class for task board errors."""


class ReferentialError(TaskBoardError):
    """A ticket operation named a list that does not exist."""

    def __init__(self, list_id: str):
        super().__init__(f"Unknown list: {list_id}")
        self.list_id = list_id


class StoreError(TaskBoardError):
    """The underlying store failed to read or write."""


class UnknownTableError(TaskBoardError, KeyError):
    """A store call named a table it does not manage."""

    def __init__(self, table: str):
        super().__init__(table)
        self.table = table

    def __str__(self) -> str:
        return f"Unknown table: {self.table}"

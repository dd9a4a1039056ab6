from __future__ import annotations


class InteractiveError(Exception):
    """Base class for faults raised by the prompt and reaction-control core."""


class GateAlreadyClosed(InteractiveError, RuntimeError):
    pass


class GateAlreadyOpen(InteractiveError, RuntimeError):
    pass


class InvalidStartIndex(InteractiveError, ValueError):
    def __init__(self, index: int, index_range: range):
        self.index = index
        self.index_range = index_range
        super().__init__(f"starting index {index} is outside {index_range!r}")


class ForeignMessageError(InteractiveError, PermissionError):
    def __init__(self, message_id: int):
        self.message_id = int(message_id)
        super().__init__(f"message {self.message_id} was not sent by this bot")

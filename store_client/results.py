from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from store_proto import fruit_engine_pb2 as pb2


class Status(IntEnum):
    """Outcome kinds. Values match the Code enum in fruit_engine.proto."""

    OK = pb2.OK
    BAD_REQUEST = pb2.BAD_REQUEST
    NOT_FOUND = pb2.NOT_FOUND
    ALREADY_EXISTS = pb2.ALREADY_EXISTS
    INTERNAL_ERROR = pb2.INTERNAL_ERROR
    UNAVAILABLE = pb2.UNAVAILABLE

    @classmethod
    def from_code(cls, code) -> "Status":
        try:
            return cls(code)
        except ValueError:
            return cls.INTERNAL_ERROR


class EngineError(Exception):
    """A compute engine call did not succeed (rejected or unreachable)."""

    def __init__(self, status: Status, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


@dataclass(frozen=True)
class Outcome:
    status: Status
    message: str
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.status == Status.OK

    @classmethod
    def success(cls, message: str, value: Any = None) -> "Outcome":
        return cls(Status.OK, message, value)

    @classmethod
    def failure(cls, error: EngineError) -> "Outcome":
        return cls(error.status, error.message)

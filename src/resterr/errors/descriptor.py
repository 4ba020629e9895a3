"""REST error descriptors.

An ErrorDescriptor is the externally visible shape of an error: an HTTP
status code and a message. Descriptors held by a registry also carry their
pre-rendered JSON payload so that known errors are never re-serialized while
serving requests.

The wire format is fixed:

    {"status-code": 404, "message": "resource missing"}

The cached payload is a private attribute and is never part of it.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

CONTENT_TYPE = "application/json"


class ErrorDescriptor(BaseModel):
    """Externally visible description of an error.

    Attributes:
        status_code: HTTP status code written to the response
        message: Message exposed to the client

    Example:
        descriptor = ErrorDescriptor(status_code=404, message="resource missing")
        descriptor.serialize()
        # b'{"status-code":404,"message":"resource missing"}'

    Note:
        Equality also compares the cached payload, so a prepared descriptor
        is not equal to its unprepared template. Compare ``status_code`` and
        ``message`` when that matters.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: int = Field(alias="status-code", strict=True)
    message: str = Field(strict=True)

    _serialized: Optional[bytes] = PrivateAttr(default=None)

    @property
    def serialized(self) -> Optional[bytes]:
        """Pre-rendered payload, or None if this descriptor was never prepared."""
        return self._serialized

    def serialize(self) -> bytes:
        """Render the canonical JSON payload for this descriptor."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

    def prepared(self) -> "ErrorDescriptor":
        """Return a copy carrying its own serialized payload.

        Raises:
            ValueError: If the descriptor cannot be serialized
            TypeError: If the descriptor cannot be serialized
        """
        payload = self.serialize()
        copy = self.model_copy()
        copy._serialized = payload
        return copy

    def __str__(self) -> str:
        return f"status code: '{self.status_code}', message: '{self.message}'"


GENERIC_ERROR = ErrorDescriptor(status_code=500, message="something went wrong")


class RESTError(Exception):
    """An exception that already knows its external shape.

    Raising a RESTError (or chaining one as the cause of another error)
    bypasses registry lookup: the dispatcher writes its descriptor as is.

    Example:
        raise RESTError(418, "short and stout")

        try:
            brew()
        except KettleError as e:
            raise RESTError(503, "kettle unavailable") from e
    """

    def __init__(self, status_code: int, message: str):
        self.descriptor = ErrorDescriptor(status_code=status_code, message=message)
        super().__init__(status_code, message)

    @classmethod
    def from_descriptor(cls, descriptor: ErrorDescriptor) -> "RESTError":
        return cls(descriptor.status_code, descriptor.message)

    @property
    def status_code(self) -> int:
        return self.descriptor.status_code

    @property
    def message(self) -> str:
        return self.descriptor.message

    def __str__(self) -> str:
        return str(self.descriptor)

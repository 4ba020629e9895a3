"""Interfaces the translation layer depends on.

The dispatcher never talks to a concrete HTTP framework or a concrete error
hierarchy. It works against the two protocols defined here, which keeps it
easy to plug into any transport and easy to test with simple fakes.
"""

from typing import Any, Iterable, Protocol, Union, runtime_checkable


@runtime_checkable
class ResponseSink(Protocol):
    """Where the final response is written.

    A sink receives, in order: the content-type header, the status code and
    the body bytes. Implementations adapt this to whatever the transport
    exposes (a Starlette ``Response``, another framework's response object, a test
    recorder, ...).
    """

    def set_status(self, status_code: int) -> None:
        """Set the response status code."""
        ...

    def set_header(self, name: str, value: str) -> None:
        """Set (replace) a response header."""
        ...

    def write(self, data: bytes) -> Any:
        """Write body bytes. May raise if the transport fails."""
        ...


@runtime_checkable
class ChainableError(Protocol):
    """Optional hooks an exception can implement to control chain matching.

    Neither method is required. Exceptions without ``unwrap`` are unwrapped
    through their explicit cause (``raise ... from``) and exceptions without
    ``matches`` are compared by identity.
    """

    def unwrap(self) -> Union[None, BaseException, Iterable[BaseException]]:
        """Return the wrapped cause(s), if any."""
        ...

    def matches(self, target: BaseException) -> bool:
        """Return True if this error should be treated as ``target``."""
        ...

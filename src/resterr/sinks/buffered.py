"""In-memory response sink.

BufferedResponseSink records what the dispatcher writes so that a transport
can emit it afterwards (ErrorHandlingMiddleware does exactly that) and so that
tests can inspect it.
"""

import json
from typing import Any, Dict, Optional, Tuple

from starlette.responses import Response

from ..exceptions import SinkError


class BufferedResponseSink:
    """Records status, headers and body bytes.

    Header names are case-insensitive; the last value set wins.

    Example:
        sink = BufferedResponseSink()
        dispatcher.dispatch(None, sink, err)
        sink.status_code, sink.header("content-type"), sink.body
    """

    def __init__(self):
        self.status_code: Optional[int] = None
        self._headers: Dict[str, Tuple[str, str]] = {}
        self._body = bytearray()
        self.closed = False

    def _check_open(self) -> None:
        if self.closed:
            raise SinkError("response sink is closed")

    def set_status(self, status_code: int) -> None:
        self._check_open()
        self.status_code = status_code

    def set_header(self, name: str, value: str) -> None:
        self._check_open()
        self._headers[name.lower()] = (name, value)

    def write(self, data: bytes) -> int:
        self._check_open()
        self._body.extend(data)
        return len(data)

    def close(self) -> None:
        self.closed = True

    def header(self, name: str) -> Optional[str]:
        entry = self._headers.get(name.lower())
        return entry[1] if entry is not None else None

    @property
    def headers(self) -> Dict[str, str]:
        return {name: value for name, value in self._headers.values()}

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def json(self) -> Any:
        return json.loads(self._body)

    def to_response(self) -> Response:
        """Render the recorded response; 500 if no status was set.

        Content-Length is always recomputed from the body.
        """
        headers = {
            name: value
            for key, (name, value) in self._headers.items()
            if key != "content-length"
        }
        status_code = self.status_code if self.status_code is not None else 500
        return Response(content=self.body, status_code=status_code, headers=headers)

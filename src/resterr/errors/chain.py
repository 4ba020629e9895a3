"""Error chain traversal.

The registry maps sentinel exception *instances* to descriptors. An error
matches a sentinel when it is the sentinel or wraps it somewhere in its chain
of causes. This module defines what "wraps" means:

1. an exception may define ``unwrap()`` returning None, one exception or an
   iterable of exceptions; when present it fully controls unwrapping
2. otherwise the members of an exception group are followed
3. and the explicit cause set by ``raise ... from`` is followed

The implicit ``__context__`` ("during handling of the above exception...")
is not followed: an unrelated bug raised inside an ``except`` block must not
be translated as the error that was being handled.
"""

from typing import Iterator, List, Optional

from .descriptor import RESTError


class WrappedError(Exception):
    """Adds context to an error while keeping it matchable.

    Example:
        err = wrap("lookup failed", ERR_NOT_FOUND)
        str(err)  # "lookup failed: resource missing"
    """

    def __init__(self, message: str, cause: BaseException):
        super().__init__(message)
        self.message = message
        self.__cause__ = cause

    def unwrap(self) -> Optional[BaseException]:
        return self.__cause__

    def __str__(self) -> str:
        return f"{self.message}: {safe_str(self.__cause__)}"


def wrap(message: str, cause: BaseException) -> WrappedError:
    """Wrap ``cause`` with an extra layer of context."""
    return WrappedError(message, cause)


def _unwrap(err: BaseException) -> List[BaseException]:
    hook = getattr(err, "unwrap", None)
    if callable(hook):
        wrapped = hook()
        if wrapped is None:
            return []
        if isinstance(wrapped, BaseException):
            return [wrapped]
        return [e for e in wrapped if isinstance(e, BaseException)]

    children: List[BaseException] = []
    if isinstance(err, BaseExceptionGroup):
        children.extend(err.exceptions)
    if err.__cause__ is not None:
        children.append(err.__cause__)
    return children


def iter_chain(err: BaseException) -> Iterator[BaseException]:
    """Yield ``err`` and every error it wraps, depth first.

    Each error is yielded at most once, so self-referencing chains are safe.
    """
    seen = set()
    stack = [err]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(reversed(_unwrap(current)))


def matches(candidate: BaseException, sentinel: BaseException) -> bool:
    """Return True if ``candidate`` itself stands for ``sentinel``.

    Exceptions compare by identity unless they override ``__eq__``; an
    exception can also claim a sentinel through a ``matches`` hook.
    """
    if candidate is sentinel or candidate == sentinel:
        return True
    hook = getattr(candidate, "matches", None)
    if callable(hook):
        return bool(hook(sentinel))
    return False


def is_error(err: BaseException, sentinel: BaseException) -> bool:
    """Return True if ``err`` is ``sentinel`` or wraps it."""
    return any(matches(node, sentinel) for node in iter_chain(err))


def find_rest_error(err: BaseException) -> Optional[RESTError]:
    """Return the first RESTError on the chain of ``err``, if any."""
    for node in iter_chain(err):
        if isinstance(node, RESTError):
            return node
    return None


def safe_str(obj: object) -> str:
    """``str(obj)``, or a placeholder if its ``__str__`` raises."""
    try:
        return str(obj)
    except Exception:
        return f"<unprintable {type(obj).__name__}>"


def describe(err: BaseException) -> str:
    """Textual description of an error for log records."""
    text = safe_str(err)
    name = type(err).__name__
    return f"{name}: {text}" if text else name

"""
Request context shared across layers

Holds the correlation id of the operation being served so that errors and
log lines raised deep in the stack can be tied back to one request.
"""
from contextvars import ContextVar, Token
from typing import Optional
from uuid import uuid4


_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    return uuid4().hex


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> Token:
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)

"""
Default label encoding used when a caller does not pass one explicitly.

Stored in a ContextVar, so each thread (and each asyncio task) sees its own value.
Core algorithms never read it; only the public API resolves `encoding=None` here.
"""

import contextvars
import logging

from domain.encodings.twoclass import OneZero, TwoClassEncoding

logger = logging.getLogger(__name__)

cv_encoding: contextvars.ContextVar[TwoClassEncoding] = contextvars.ContextVar("encoding", default=OneZero())


def current_encoding() -> TwoClassEncoding:
    """Return the encoding currently used as the default."""
    return cv_encoding.get()


def set_encoding(encoding: TwoClassEncoding) -> TwoClassEncoding:
    """Set the default encoding and return it."""
    if not isinstance(encoding, TwoClassEncoding):
        raise TypeError(f"Expected a TwoClassEncoding, got {type(encoding).__name__}")
    cv_encoding.set(encoding)
    logger.debug("Default encoding set to %s", encoding)
    return encoding


def reset_encoding() -> TwoClassEncoding:
    """Restore the `OneZero` default encoding."""
    return set_encoding(OneZero())


def resolve_encoding(encoding: TwoClassEncoding | None) -> TwoClassEncoding:
    return current_encoding() if encoding is None else encoding

"""Emulator error types and checkify plumbing.

Checks inside compiled code are expressed with ``checkify.check``; public entry
points are wrapped with :func:`checked`, which compiles the checkified function
and re-raises a failed check as one of the exception types below.
"""

from functools import wraps

import jax
from jax.experimental import checkify

STACK_OVERFLOW = "stack overflow"
STACK_UNDERFLOW = "stack underflow"
MEMORY_OUT_OF_RANGE = "memory access out of range"
KEY_OUT_OF_RANGE = "key index out of range"


class EmulatorError(Exception):
    pass


class StackOverflowError(EmulatorError):
    pass


class StackUnderflowError(EmulatorError):
    pass


class MemoryAccessError(EmulatorError):
    pass


_ERROR_TYPES = (
    (STACK_OVERFLOW, StackOverflowError),
    (STACK_UNDERFLOW, StackUnderflowError),
    (MEMORY_OUT_OF_RANGE, MemoryAccessError),
    (KEY_OUT_OF_RANGE, MemoryAccessError),
)


def raise_for_error(error: checkify.Error) -> None:
    """Raise the typed exception matching a failed check, if any."""
    message = error.get()
    if message is None:
        return
    for prefix, error_type in _ERROR_TYPES:
        if message.startswith(prefix):
            raise error_type(message)
    raise EmulatorError(message)


def checked(fn=None, *, static_argnums=()):
    """Compile ``fn`` with checkify and raise typed errors on failed checks."""
    if fn is None:
        return lambda f: checked(f, static_argnums=static_argnums)

    checked_fn = jax.jit(checkify.checkify(fn), static_argnums=static_argnums)

    @wraps(fn)
    def wrapper(*args):
        error, result = checked_fn(*args)
        raise_for_error(error)
        return result

    return wrapper

"""CHIP-8 stack operations."""

import jax.numpy as jnp
from jax.experimental import checkify

from chipjax.constants import STACK_SIZE
from chipjax.errors import STACK_OVERFLOW, STACK_UNDERFLOW
from chipjax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    checkify.check(stack.pointer < STACK_SIZE, STACK_OVERFLOW + ": {depth} return addresses already stacked",
                   depth=jnp.asarray(stack.pointer))
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16))
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    checkify.check(stack.pointer > 0, STACK_UNDERFLOW + ": return with an empty stack")
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address

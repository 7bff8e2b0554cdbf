# multigp_jax/core/outcome.py
"""
Tagged evaluation outcome.

A density evaluation either succeeds with a value or fails with an error kind
and a diagnostic message. Both variants are pytrees, so an outcome can be
returned as auxiliary output of ``jax.value_and_grad(..., has_aux=True)``;
only ``value`` is a leaf, the tag and message are static.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from jax.tree_util import register_pytree_node_class

from .errors import ErrorKind, error_for


@register_pytree_node_class
@dataclass(frozen=True)
class Success:
    value: Any

    ok = True

    def unwrap(self):
        return self.value

    def tree_flatten(self):
        return (self.value,), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        return cls(value=children[0])


@register_pytree_node_class
@dataclass(frozen=True)
class Failure:
    """
    Failed evaluation.

    value: accumulator at the point of failure (the neutral value for
           densities that fail during validation)
    kind: ErrorKind of the violated constraint
    message: diagnostic message
    """
    value: Any
    kind: ErrorKind
    message: str

    ok = False

    def unwrap(self):
        raise error_for(self.kind)(self.message)

    def tree_flatten(self):
        return (self.value,), (self.kind, self.message)

    @classmethod
    def tree_unflatten(cls, aux, children):
        kind, message = aux
        return cls(value=children[0], kind=kind, message=message)


Outcome = Union[Success, Failure]

__all__ = ["Success", "Failure", "Outcome"]

"""The contract an entity must satisfy to be evolved by a population."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

M = TypeVar("M", bound="Member")


@runtime_checkable
class Member(Protocol):
    """An evolvable entity.

    ``fitness`` is requested exactly once per generation and must be a
    non-negative integer where higher is better. ``breed`` combines two
    parents (and applies any mutation) into a new member.
    """

    def fitness(self, metadata: Any) -> int:
        ...

    @classmethod
    def breed(cls: type[M], left: M, right: M, metadata: Any) -> M:
        ...

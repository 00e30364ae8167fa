"""Compiled SQL statement value object."""

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Union

Params = Union[Mapping[str, Any], Sequence[Any]]


@dataclass(frozen=True)
class CompiledStatement:
    """SQL text plus the values to bind to it.

    Attributes:
        sql: Statement text with named (:name) or positional markers
        params: Mapping for named markers, sequence for positional ones
    """

    sql: str
    params: Params

    @property
    def is_positional(self) -> bool:
        return not isinstance(self.params, Mapping)

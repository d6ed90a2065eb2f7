"""Result values for rate resolution attempts."""
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    reason: str
    # True when the remote source itself was unreachable or errored
    upstream: bool = False
    error: Any = None

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Failure]

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Success:
    pass


@dataclass(frozen=True)
class Skip:
    reason: str


@dataclass(frozen=True)
class Fail:
    cause: Any = None
    message: Optional[str] = None


Outcome = Union[Success, Skip, Fail]


def as_outcome(value: Any) -> Outcome:
    """Normalize a value returned by a hook or a test body."""
    if value is None:
        return Success()
    if isinstance(value, (Success, Skip, Fail)):
        return value
    raise TypeError(
        f"Test functions must return None, Success, Skip or Fail, not {type(value).__name__}."
    )

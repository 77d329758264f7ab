"""
Explicit success/failure values returned by the booking core and its collaborators.

Operations return `Ok(value)` or `Err(ServiceError)` instead of raising, so a caller has to look at the
result before it can reach the value:
```python
result = await logic_booking.create_booking(...)
if isinstance(result, Err):
    return result
booking = result.value
```
The transport layer turns an `Err` into an HTTP error with `app.utils.tools.unwrap`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    not_found = "not_found"
    invalid_request = "invalid_request"
    not_permitted = "not_permitted"

    def __str__(self) -> str:
        return f"{self.name}<{self.value}>"


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    detail: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ServiceError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def detail(self) -> str:
        return self.error.detail


Result = Ok[T] | Err


def not_found(detail: str) -> Err:
    """The entity does not exist, or the caller is not allowed to know it exists"""
    return Err(ServiceError(kind=ErrorKind.not_found, detail=detail))


def invalid_request(detail: str) -> Err:
    return Err(ServiceError(kind=ErrorKind.invalid_request, detail=detail))


def not_permitted(detail: str) -> Err:
    """A known principal tried an action reserved to someone else"""
    return Err(ServiceError(kind=ErrorKind.not_permitted, detail=detail))

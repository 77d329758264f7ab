from typing import TypeVar

from fastapi import HTTPException

from app.types.result import Err, ErrorKind, Result

T = TypeVar("T")

HTTP_STATUS_BY_ERROR_KIND: dict[ErrorKind, int] = {
    ErrorKind.not_found: 404,
    ErrorKind.invalid_request: 400,
    ErrorKind.not_permitted: 403,
}


def unwrap(result: Result[T]) -> T:
    """
    Return the value of an `Ok` result, or raise the HTTPException matching the error kind of an `Err`.

    This function should only be used by endpoints, cruds and logic files must return the result as is.
    """
    if isinstance(result, Err):
        raise HTTPException(
            status_code=HTTP_STATUS_BY_ERROR_KIND[result.kind],
            detail=result.detail,
        )
    return result.value


def is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""

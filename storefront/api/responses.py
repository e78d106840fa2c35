"""Mapping of service results to HTTP responses."""

from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import status
from fastapi.responses import JSONResponse

from storefront.api.schemas import ServiceResponse
from storefront.domain.results import ServiceResult

T = TypeVar("T")

STATUS_BY_ERROR_CODE = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "VALIDATION_FAILURE": status.HTTP_400_BAD_REQUEST,
}


def to_response(
    result: ServiceResult[T],
    convert: Callable[[T], Any] | None = None,
) -> JSONResponse:
    """Render a service result as the JSON envelope.

    Args:
        result: Service outcome.
        convert: Turns the payload into its API schema; identity if omitted.

    Returns:
        200 on success, otherwise the status mapped from the error code.
    """
    if not result.success:
        envelope = ServiceResponse[Any](data=None, success=False, message=result.message)
        status_code = STATUS_BY_ERROR_CODE.get(
            result.error_code or "", status.HTTP_400_BAD_REQUEST
        )
        return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))

    data = result.data
    if convert is not None and data is not None:
        data = convert(data)

    envelope = ServiceResponse[Any](data=data, success=True, message=result.message)
    return JSONResponse(status_code=status.HTTP_200_OK, content=envelope.model_dump(mode="json"))

from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Wrap a Compath payload in the `{status_code, status, message, data}` envelope.

    Routes and the exception handlers both answer through here, so the browser
    client always finds a diagnosis, market score or review analysis under
    `data`. `status` is "success" below 400 and "error" from 400 up; pydantic
    models and datetimes in `data` go through jsonable_encoder.
    """
    status_str = "success" if status_code < 400 else "error"
    data = jsonable_encoder(data) if data is not None else {}

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "status": status_str,
            "message": message,
            "data": data,
        },
    )

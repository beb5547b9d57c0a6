from fastapi.responses import JSONResponse, PlainTextResponse
from app.core.errors import PhotoSearchError, wrap_error_message


class UTF8JSONResponse(JSONResponse):
    # starlette only appends a charset to text/* media types
    media_type = "application/json; charset=utf-8"


def sentinel_error_response(error: PhotoSearchError) -> PlainTextResponse:
    return PlainTextResponse(
        wrap_error_message(error.message),
        status_code=error.status_code,
        headers={"X-Error-Kind": error.kind},
    )

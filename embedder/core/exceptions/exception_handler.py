import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from embedder.core.exceptions.error_messages import ErrorKey, get_error_message
from embedder.core.exceptions.exception_classes import AppException


logger = logging.getLogger(__name__)


def init_error_handlers(app, debug: bool = False):
    @app.exception_handler(AppException)
    def handle_app_exception(request: Request, error: AppException):
        if error.status_code >= 500:
            logger.error(f"Handled {error.error_key.value}: {error.error_detail or error}")
        else:
            logger.info(f"Handled bad request: {error}")
        response = {
            "error": get_error_message(
                request=request,
                error_key=error.error_key,
                error_variables=error.error_variables,
            ),
            "error_code": error.status_code,
            "error_key": error.error_key.value,
            "error_detail": error.error_detail if debug else None,
        }
        return JSONResponse(
            content=jsonable_encoder(response), status_code=error.status_code
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected malformed request body: {exc.errors()}")
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        response = {
            "error": get_error_message(
                request=request,
                error_key=ErrorKey.INVALID_REQUEST,
                error_variables=(detail,),
            ),
            "error_code": 400,
            "error_key": ErrorKey.INVALID_REQUEST.value,
        }
        return JSONResponse(content=jsonable_encoder(response), status_code=400)

    @app.exception_handler(500)
    def handle_internal_server_error(request: Request, _: Exception):
        response = {
            "error": get_error_message(
                error_key=ErrorKey.INTERNAL_ERROR, request=request
            ),
        }
        return JSONResponse(content=jsonable_encoder(response), status_code=500)

import time
from fastapi import Request
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

from poemario.logs.server_log import api_logger
from poemario.logs.debug_log import debug_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        method = request.method
        url = str(request.url)
        client_host = request.client.host if request.client else "unknown"

        # Детали запроса только в debug.log
        debug_logger.log_request(request)

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.perf_counter() - start_time
            debug_logger.log_exception(f"Ошибка при обработке запроса {method} {url}")
            api_logger.error(f"Error processing request {method} {url} after {process_time:.3f}s: {e}")
            raise

        process_time = time.perf_counter() - start_time
        api_logger.info(
            f"Request: {method} {url} | "
            f"Status: {response.status_code} | "
            f"Client: {client_host} | "
            f"Process Time: {process_time:.3f}s"
        )
        debug_logger.log_response(response, process_time)

        return response


class PreflightCORSMiddleware(CORSMiddleware):
    """CORS с пустым телом успешного preflight-ответа (200 без "OK")"""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)

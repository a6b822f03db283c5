from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


def _log_level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def setup_middleware(app: FastAPI):
    """Registrar CORS y el log de requests"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[PROCESS_TIME_HEADER],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers[PROCESS_TIME_HEADER] = f"{process_time:.4f}"

        # Rechazos de validación y conflictos quedan en WARNING, fallas en ERROR
        logger.log(
            _log_level_for(response.status_code),
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        return response

"""Audit logging middleware."""
import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("task_api.audit")


class AuditMiddleware(BaseHTTPMiddleware):
    """Log every data-modifying request with its outcome."""

    # Methods that modify data
    WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
    # Paths to exclude from audit logging
    EXCLUDED_PATHS = {"/health", "/metrics", "/docs", "/redoc", "/openapi.json"}

    ACTIONS = {
        "POST": "create",
        "PUT": "update",
        "PATCH": "update",
        "DELETE": "delete",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.EXCLUDED_PATHS or request.method not in self.WRITE_METHODS:
            return await call_next(request)

        response = await call_next(request)

        action = self.ACTIONS.get(request.method, request.method.lower())
        client = request.client.host if request.client else "-"
        message = f"task {action} {request.url.path} status={response.status_code} client={client}"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        return response

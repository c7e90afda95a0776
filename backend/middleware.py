import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Middleware pour logger toutes les requêtes HTTP (méthode, chemin, statut, durée)
    """

    # Endpoints sans intérêt pour les logs
    IGNORE_PATHS = ("/docs", "/openapi.json", "/favicon.ico", "/redoc")

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self._log_request(scope, status_code, time.perf_counter() - start_time)

    def _log_request(self, scope, status_code: int, process_time: float):
        path = scope.get("path", "")
        if path.startswith(self.IGNORE_PATHS):
            return

        level = logging.INFO
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING

        logger.log(
            level, "%s %s -> %d (%.1f ms)",
            scope.get("method"), path, status_code, process_time * 1000
        )

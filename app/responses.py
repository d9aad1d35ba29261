# =============================================================================
# app/responses.py - Download Responses
# =============================================================================
# TemporaryFileResponse sends a file and then deletes it.
#
# Starlette's FileResponse only runs background tasks after a successful
# send, so a client that disconnects mid-download would leave the file
# behind. Cleanup here sits in a `finally` around the whole send instead.
# =============================================================================

import logging
from collections.abc import Callable
from pathlib import Path

from fastapi.responses import FileResponse, JSONResponse
from starlette.types import Message, Receive, Scope, Send

from app.exceptions import ExportDeliveryFailedError
from core.services.export_service import remove_export_file

logger = logging.getLogger(__name__)


class TemporaryFileResponse(FileResponse):
    """
    FileResponse that deletes its file once the send finishes or fails.

    If sending fails before any bytes went out, the client gets an
    ExportDeliveryFailedError JSON body instead. Once the response has
    started there is nothing useful left to send, so the error is logged
    and re-raised for the server to close the connection.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        cleanup: Callable[[str | Path], bool] = remove_export_file,
        **kwargs,
    ):
        super().__init__(path, **kwargs)
        self.cleanup = cleanup

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await super().__call__(scope, receive, tracking_send)
        except Exception as e:
            logger.error(f"Error downloading {self.filename or self.path}: {e}")
            if response_started:
                raise
            error = ExportDeliveryFailedError(str(e))
            fallback = JSONResponse(status_code=error.status_code, content=error.to_dict())
            await fallback(scope, receive, send)
        finally:
            self.cleanup(self.path)

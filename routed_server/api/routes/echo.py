from fastapi import Request, Response

from .base import BODY_READ_ERRORS, Route


class EchoRoute(Route):
    """Copies the request body back to the response."""

    def pattern(self) -> str:
        return "/echo"

    async def handle(self, request: Request) -> Response:
        try:
            body = await request.body()
        except BODY_READ_ERRORS as e:
            self._logger.warning(
                "failed_to_handle_request",
                route=self.pattern(),
                error=str(e),
                error_type=type(e).__name__,
            )
            return Response()

        return Response(content=body, media_type="application/octet-stream")

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse

from .base import BODY_READ_ERRORS, Route

INTERNAL_ERROR_BODY = "Internal server error\n"


class HelloRoute(Route):
    """Greets the caller with whatever text they posted."""

    def pattern(self) -> str:
        return "/hello"

    async def handle(self, request: Request) -> Response:
        try:
            body = await request.body()
        except BODY_READ_ERRORS as e:
            self._logger.error(
                "failed_to_read_request",
                route=self.pattern(),
                error=str(e),
                error_type=type(e).__name__,
            )
            return PlainTextResponse(
                INTERNAL_ERROR_BODY,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        # surrogateescape keeps non-UTF-8 bytes intact on the way back out
        name = body.decode("utf-8", errors="surrogateescape")
        greeting = f"Hello, {name}\n".encode("utf-8", errors="surrogateescape")
        return Response(content=greeting, media_type="text/plain; charset=utf-8")

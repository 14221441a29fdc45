"""wifiviewer application entrypoint."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

from wifiviewer.config import load_config, settings
from wifiviewer.scanner.chain import build_default_adapters

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log which probes this host will use."""
    cfg = load_config()
    platform = cfg.resolve_platform()
    adapters = [a.name for a in build_default_adapters(cfg, platform) if a.is_applicable()]
    if adapters:
        logger.info("Platform %s, probe order: %s", platform, ", ".join(adapters))
    else:
        logger.warning("Platform %s has no supported Wi-Fi probes", platform)
    yield


app = FastAPI(
    title="wifiviewer",
    description="Nearby Wi-Fi access point discovery",
    version="0.1.0",
    lifespan=lifespan,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


app.add_middleware(SecurityHeadersMiddleware)


# Register routers
from wifiviewer.api.routes import router as api_router  # noqa: E402

app.include_router(api_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def main() -> None:
    import uvicorn

    logger.info("Starting wifiviewer on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

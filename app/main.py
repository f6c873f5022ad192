"""FastAPI application entry point."""
import uvicorn
from fastapi import FastAPI

from app.config import get_settings
from app.logging_config import configure_logging
from app.routers import health, recommendations


configure_logging()

app = FastAPI(title="Activity Recommendation API")


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(health.router)
app.include_router(recommendations.router)


def run() -> None:
    """Serve the API on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

import logging

import uvicorn
from fastapi import FastAPI

from .lookup.router import router as lookup_router
from .settings import get_settings

app = FastAPI(title="Place Lookup", version="0.1.0")

# Include routers
app.include_router(lookup_router)

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the web server."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not settings.google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not set; lookups will answer 500")
    logger.info("Starting Place Lookup Web Server")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()

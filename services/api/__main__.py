"""
API Entry Point

Allows execution via: python -m services.api
"""

import uvicorn

from utils.config import get_settings
from utils.logging import setup_logging

if __name__ == "__main__":
    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)

    uvicorn.run(
        "services.api.app:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_config=None,
    )

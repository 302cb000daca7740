"""
FastAPI Production Server

Run the API Recommender Assistant in production mode.

Usage:
    python scripts/run-prod.py
"""

import sys
import os
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.chdir(project_root)

import uvicorn
from loguru import logger

from api_recommender.config.settings import settings


def main():
    """Start the FastAPI production server"""
    logger.info("=" * 80)
    logger.info("API Recommender Assistant - API Server (Production)")
    logger.info("=" * 80)
    logger.info(f"Listening on {settings.server_host}:{settings.server_port}")

    uvicorn.run(
        "api_recommender.api.app:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=False,
        log_level="info",
        access_log=True
    )


if __name__ == "__main__":
    main()

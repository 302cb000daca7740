"""
FastAPI Development Server

Run the API Recommender Assistant in development mode.

Usage:
    python scripts/run-dev.py
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
    """Start the FastAPI development server"""
    logger.info("=" * 80)
    logger.info("API Recommender Assistant - API Server")
    logger.info("=" * 80)
    logger.info(f"Server will be available at: http://localhost:{settings.server_port}")
    logger.info(f"API Documentation: http://localhost:{settings.server_port}/docs")
    logger.info(f"Chat: POST http://localhost:{settings.server_port}/api/chat")
    logger.info("Press CTRL+C to stop the server")
    logger.info("=" * 80)

    uvicorn.run(
        "api_recommender.api.app:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=True,
        log_level="info",
        access_log=True,
        reload_dirs=[str(project_root / "api_recommender")]
    )


if __name__ == "__main__":
    main()

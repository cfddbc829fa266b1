#!/usr/bin/env python
"""
Lookup API Server Runner.

Usage:
    python run_api.py

Environment:
    API_HOST, API_PORT (or PORT), LOG_LEVEL, ENVIRONMENT, DATABASE_URL
"""

import os
import sys
import logging

import uvicorn
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)


def main():
    """Run the lookup API server."""
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", os.getenv("PORT", "3000")))
    reload = os.getenv("ENVIRONMENT", "production") == "development"

    logger.info(f"Starting Vehicle Risk Lookup API on http://{host}:{port}")
    logger.info("  GET  /api/check/ABC-1234    - look up a plate")
    logger.info("  POST /api/report            - report a violation")
    logger.info("  GET  /api/history/ABC-1234  - violation history")
    logger.info("If the database is empty, run: python -m scripts.bootstrap_db --seed-data")

    try:
        uvicorn.run(
            "api.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info",
            access_log=True,
        )
    except Exception as e:
        logger.error(f"Failed to start API: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
============================================================================
Project Appeal Desk v1.0.0
Process Entry Point
============================================================================

Starts the appeal ingress under uvicorn.

ENVIRONMENT:
    See services/bot_config.py. A .env file in the working directory is
    loaded before anything else.

USAGE:
    python main.py

============================================================================
"""

import logging
import os

import uvicorn
from dotenv import load_dotenv

from services.bot_config import DEFAULT_PORT

# Load environment variables first
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("APPEAL_DESK")


def main() -> None:
    try:
        port = int(os.environ.get("PORT", str(DEFAULT_PORT)))
    except ValueError:
        logger.warning(f"Invalid PORT value, using default: {DEFAULT_PORT}")
        port = DEFAULT_PORT

    logger.info(f"Server running on port {port}")
    uvicorn.run("app.main:app", host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    main()

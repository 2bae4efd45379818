#!/usr/bin/env python3
"""
Serve the shop store API with uvicorn.
"""

import argparse
import sys
from pathlib import Path

import uvicorn

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from shopstore.core.config import DEBUG


def main():
    parser = argparse.ArgumentParser(description="Run the shop store API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=8000, help="Port (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "shopstore.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if DEBUG else "info",
    )


if __name__ == "__main__":
    main()

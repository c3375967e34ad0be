#!/usr/bin/env python3
"""
Launch script for the Flight Track Log Converter service.

Usage:
    python run_server.py [--port PORT] [--host HOST]

Examples:
    python run_server.py                    # Serve on 127.0.0.1:8000
    python run_server.py --port 5000        # Run on port 5000
    python run_server.py --on-feed-error skip
"""

import argparse
import os
import sys
from pathlib import Path

# Add tracklog to path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    parser = argparse.ArgumentParser(description="Flight Track Log Converter Server")
    parser.add_argument(
        "--on-feed-error",
        choices=["abort", "skip"],
        default=None,
        help="Default policy when a feed cannot be fetched or decoded"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )

    args = parser.parse_args()

    # Settings are read from the environment when the app is imported
    if args.on_feed_error:
        os.environ["TRACKLOG_ON_FEED_ERROR"] = args.on_feed_error

    print("Flight Track Log Converter")
    print("=" * 40)
    print(f"Server: http://{args.host}:{args.port}")
    print("=" * 40)

    print("\nAPI Endpoints:")
    print("  GET  /                - Health check")
    print("  GET  /health          - Detailed health")
    print("  POST /tracklogs       - Convert feeds, JSON summary + CSV")
    print("  POST /tracklogs/csv   - Convert feeds, CSV download")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "tracklog.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()

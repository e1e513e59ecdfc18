"""
Initialize settings based on command-line arguments and environment.

Usage:
    # Import in main.py to get mode-aware settings
    from gateway.core.init_settings import settings

    # Or run directly
    python -m gateway.main --mode production --host 0.0.0.0
"""
import os
import argparse

from gateway.core.config import SETTINGS_BY_MODE, get_settings

# Port from environment or default
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
DEFAULT_MODE = os.getenv("APP_ENV", "development")

parser = argparse.ArgumentParser(description="GraphQL Gateway")
parser.add_argument(
    "--mode",
    choices=sorted(SETTINGS_BY_MODE),
    default=DEFAULT_MODE,
    help="Running mode (default: $APP_ENV or development)",
)
parser.add_argument(
    "--host",
    type=str,
    default="127.0.0.1",
    help="Host to bind to",
)
parser.add_argument(
    "--port",
    type=int,
    default=DEFAULT_PORT,
    help="Port to bind to (default: $PORT or 8000)",
)

# Under uvicorn or pytest the command line belongs to someone else
args, _ = parser.parse_known_args()

settings = get_settings(args.mode)

__all__ = ["settings", "args"]

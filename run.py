"""
Application Runner

This script is the entry point for running the relay.
Use: python run.py   (CONFIG=path/to/config.toml to pick a config file)
"""

import sys
from pathlib import Path

# Add project root to Python path to enable 'github_relay' module imports
project_root = Path(__file__).parent.absolute()
sys.path.insert(0, str(project_root))

import uvicorn

from github_relay.config import get_settings


def main():
    """Run the application with uvicorn."""
    settings = get_settings()

    uvicorn.run(
        "github_relay.main:app",
        host=settings.app.host,
        port=settings.app.port,
        reload=False,
        log_level=settings.app.log_level.lower(),
        access_log=settings.app.debug
    )


if __name__ == "__main__":
    main()

"""Main entry point for the LSP trace dashboard."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from tracedash.api import create_fastapi_app
from tracedash.app import Application
from tracedash.config import Settings
from tracedash.logging_config import setup_logging


def main():
    """Run the dashboard."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    settings = Settings.from_env()
    application = Application(settings)
    app = create_fastapi_app(application)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

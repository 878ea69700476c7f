"""Run the SIM debug server."""

import os

import uvicorn
from dotenv import load_dotenv

from tracedash.logging_config import setup_logging

from .sim import create_sim_app


def main():
    load_dotenv()
    setup_logging()

    uvicorn.run(
        create_sim_app(),
        host=os.getenv("SIM_HOST", "localhost"),
        port=int(os.getenv("SIM_PORT", "9000")),
        log_level="info",
    )


if __name__ == "__main__":
    main()

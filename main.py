from dotenv import load_dotenv
from loguru import logger

from mediconnect.api.server import run_server
from mediconnect.config import configure_logging

load_dotenv()


if __name__ == "__main__":
    configure_logging()
    logger.info("Starting MediConnect")
    run_server()

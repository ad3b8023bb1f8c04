import logging

import uvicorn

from config import HOST, PORT
from logging_setup import setup_logging
from api.app import app

# Configure root logging once (respects LOG_LEVEL env).
setup_logging()

logging.info("Application starting up...")

if __name__ == "__main__":
    logging.info(f"Serving IWEMS on http://{HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT)

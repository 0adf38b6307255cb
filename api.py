"""Run the booking relay API with uvicorn"""

import os

from dotenv import load_dotenv
import structlog

load_dotenv()

logger = structlog.get_logger()


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    logger.info("Starting Booking Relay API server", host=host, port=port)
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        log_level="info"
    )

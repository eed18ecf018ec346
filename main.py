"""
Main entrypoint: FastAPI server for verdict fusion.

Loads scoring tables up front so a bad IOCFUSION_SCORING_TABLES file stops the
process before it serves traffic.

Env: API_HOST, API_PORT, IOCFUSION_SCORING_TABLES, IOCFUSION_DB_URL / DATABASE_URL, LOG_LEVEL.

Equivalent: uvicorn backend_iocfusion.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os
import sys

# Configure structured JSON logging before other imports that may log
from backend_iocfusion.fusion_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Validate configuration, then run the FastAPI server in the main thread."""
    api_host = os.getenv("API_HOST", "0.0.0.0").strip()
    api_port = int(os.getenv("API_PORT", "8000").strip() or "8000")

    from backend_iocfusion.config import get_scoring_tables
    from backend_iocfusion.core.exceptions import ScoringTablesError

    try:
        get_scoring_tables()
    except ScoringTablesError as e:
        logger.error("main_config_error", message=str(e))
        sys.exit(1)

    from backend_iocfusion.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=api_host, port=api_port)
    uvicorn.run(app, host=api_host, port=api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()

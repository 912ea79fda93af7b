"""Entry point: serve the calculator API with uvicorn.

Component wiring order:
1. AppSettings (configuration)
2. Logging setup
3. FastAPI app
4. uvicorn server
"""

import uvicorn

from contract_calc.api.app import create_app
from contract_calc.config import AppSettings
from contract_calc.logging import get_logger, setup_logging


def main() -> None:
    """Synchronous entry point."""
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("contract_calc.main")

    if not settings.api.enabled:
        logger.warning("api_disabled", note="Set API_ENABLED=true to serve the calculators")
        return

    app = create_app(settings)
    logger.info("starting_api", host=settings.api.host, port=settings.api.port)
    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level="warning",
    )


if __name__ == "__main__":
    main()

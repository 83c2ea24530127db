"""Run the API with uvicorn: ``python -m src``."""

import uvicorn

from src.config import settings
from src.logging_config import configure_logging


def main() -> None:
    configure_logging(settings.log_level)
    uvicorn.run(
        "src.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Run the live stats API with uvicorn."""

import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run(
        "livestats.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

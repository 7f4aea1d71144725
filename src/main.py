"""Development entry point: ``python src/main.py`` or ``uvicorn main:app``."""

import uvicorn

from app import create_app
from core.config import settings

app = create_app()


def run() -> None:
    uvicorn.run(
        "main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.logging.level.lower(),
        access_log=settings.debug,
    )


if __name__ == "__main__":
    run()

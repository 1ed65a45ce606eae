"""Run the EntrySync API with uvicorn: `python -m entrysync`."""

import uvicorn

from entrysync.config import settings


def main() -> None:
    uvicorn.run(
        "entrysync.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Run the signage service with ``python -m loft_signage``.

Binds to localhost by default; the kiosk browser runs on the same host.
"""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "loft_signage.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Account service entrypoint.

Run with:
  python -m authapi
"""

import uvicorn

from authapi.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("authapi.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

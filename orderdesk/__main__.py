"""Run the API with uvicorn: `python -m orderdesk`."""

import uvicorn

from orderdesk.common.config import settings


def main() -> None:
    uvicorn.run("orderdesk.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

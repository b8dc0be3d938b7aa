"""Run the API server: ``python -m feedmind``."""

import uvicorn

from .config import config


def main() -> None:
    uvicorn.run("feedmind.server:app", host="127.0.0.1", port=config.PORT)


if __name__ == "__main__":
    main()

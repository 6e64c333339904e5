"""Run the API with uvicorn: `python -m app`."""

import uvicorn

from app.config import API_HOST, API_PORT


def main() -> None:
    uvicorn.run("app.main:app", host=API_HOST, port=API_PORT, log_config=None)


if __name__ == "__main__":
    main()

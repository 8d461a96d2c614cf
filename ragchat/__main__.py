"""Run the API server: `python -m ragchat`."""

import uvicorn

from ragchat.config import get_settings


def main() -> None:
    """Serve the FastAPI app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "ragchat.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

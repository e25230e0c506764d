"""Backend entrypoint. Starts uvicorn with the port from settings (BACKEND_PORT)."""
import uvicorn

from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.main import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(), host="127.0.0.1", port=settings.backend_port)


if __name__ == "__main__":
    main()

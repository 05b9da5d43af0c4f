import uvicorn

from app.api.server import create_app
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.logging.logger import Log
from app.processor.processor import build_processor


def main() -> None:
    """Entry point: load settings -> build processor -> serve HTTP API."""
    settings = Settings()
    Log.configure(settings.log_level)
    if settings.db_enabled:
        init_pool(settings)

    try:
        processor = build_processor(settings)
        app = create_app(processor)
        Log.info(f"Serving scan API on {settings.api_host}:{settings.api_port}")
        uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level="info")
    finally:
        close_pool()


if __name__ == "__main__":
    main()

import uvicorn

from picserver.analysis.analyzer import build_analyzer
from picserver.api.server import create_app
from picserver.config.settings import Settings
from picserver.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> build analyzer -> serve until signalled."""
    settings = Settings()
    Log.configure(settings.log_level)

    analyzer = build_analyzer(settings)
    app = create_app(analyzer)

    Log.info(f"HTTP server starting on {settings.host}:{settings.port}")
    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    Log.info("HTTP server stopped")


if __name__ == "__main__":
    main()

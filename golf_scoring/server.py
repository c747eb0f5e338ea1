import argparse
import logging

import uvicorn

from golf_scoring.settings import Settings, load_settings

logger = logging.getLogger(__name__)
APP_MODULE = "golf_scoring.main:app"


def uvicorn_options(settings: Settings, host: str | None = None, port: int | None = None) -> dict:
    """Keyword arguments for ``uvicorn.run``; command-line host/port override the environment."""
    options = {
        "host": host or settings.host,
        "port": port if port is not None else settings.port,
        "log_level": settings.log_level.lower(),
    }
    if settings.ssl_certfile and settings.ssl_keyfile:
        options["ssl_certfile"] = settings.ssl_certfile
        options["ssl_keyfile"] = settings.ssl_keyfile
    elif settings.ssl_certfile or settings.ssl_keyfile:
        logger.warning("Both SSL_CERT_FILE and SSL_KEY_FILE are required for HTTPS, serving plain HTTP.")
    return options


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the golf scoring API.")
    parser.add_argument("--host", help="Bind address (default: APP_HOST or 0.0.0.0).")
    parser.add_argument("--port", type=int, help="Bind port (default: APP_PORT, PORT or 8000).")
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    options = uvicorn_options(settings, host=args.host, port=args.port)
    scheme = "https" if "ssl_certfile" in options else "http"
    logger.info("Starting golf scoring API on %s://%s:%s", scheme, options["host"], options["port"])
    uvicorn.run(APP_MODULE, **options)


if __name__ == "__main__":
    main()

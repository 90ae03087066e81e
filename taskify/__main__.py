import uvicorn

from taskify.config import Settings
from taskify.logging_setup import setup_logging
from taskify.main import create_app


def main():
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()

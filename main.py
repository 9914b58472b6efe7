import uvicorn

from anonboard import config


def run() -> None:
    config.configure_logging()
    uvicorn.run("anonboard.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()

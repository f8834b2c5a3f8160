import logging

import uvicorn

import config
from utils.logging_config import setup_logging

# Initialize centralized logging configuration
setup_logging()

from app import app

# Silence SQL loggers; statements are only logged when SQL_ECHO is set
if not config.SQL_ECHO:
    for logger_name in ['aiosqlite', 'sqlalchemy', 'sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.orm']:
        sql_logger = logging.getLogger(logger_name)
        sql_logger.setLevel(logging.CRITICAL)
        sql_logger.propagate = False
        for handler in sql_logger.handlers[:]:
            sql_logger.removeHandler(handler)
        sql_logger.addHandler(logging.NullHandler())
    logging.info("SQL loggers silenced (aiosqlite, sqlalchemy.*)")


def main() -> None:
    uvicorn.run(app, host=config.WEBAPP_HOST, port=config.WEBAPP_PORT)


if __name__ == "__main__":
    main()

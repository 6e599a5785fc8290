import logging.config
import sys


def setup_logging(log_level: str = "INFO", sql_echo: bool = False):
    """
    콘솔 로깅 설정

    studyapi 로거는 WARNING 이상을 stderr 에도 남긴다 (원장 거부, 정합성 불일치 등).
    sql_echo 가 켜지면 SQLAlchemy 가 실행한 쿼리를 INFO 로 출력한다.
    """
    log_level = log_level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s",
                },
                "located": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)s (%(filename)s:%(lineno)d)\n%(message)s",
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "simple",
                    "stream": sys.stdout,
                },
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "located",
                    "stream": sys.stderr,
                    "level": "WARNING",
                },
            },
            "root": {"handlers": ["stdout"], "level": log_level},
            "loggers": {
                "studyapi": {
                    "handlers": ["stdout", "stderr"],
                    "level": log_level,
                    "propagate": False,
                },
                "sqlalchemy.engine": {
                    "handlers": ["stdout"],
                    "level": "INFO" if sql_echo else "WARNING",
                    "propagate": False,
                },
                "uvicorn.access": {
                    "handlers": ["stdout"],
                    "level": log_level,
                    "propagate": False,
                },
            },
        }
    )

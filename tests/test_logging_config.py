import logging

from studyapi.logging_config import setup_logging


class TestSetupLogging:
    """로깅 설정 테스트"""

    def test_level_applies_to_app_logger(self):
        setup_logging("debug")

        assert logging.getLogger("studyapi").level == logging.DEBUG
        assert logging.getLogger("studyapi").propagate is False
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_sql_echo_enables_engine_logger(self):
        setup_logging("info", sql_echo=True)

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

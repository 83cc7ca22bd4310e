"""ロガー設定のユニットテスト"""

import logging

import pytest
import structlog

from redefynn_gate import GateConfig, configure_logging, new_logger


@pytest.fixture(autouse=True)
def clear_context():
    yield
    structlog.contextvars.clear_contextvars()


def test_new_logger_json_format() -> None:
    """JSON フォーマットのロガーが作成できること。"""
    logger = new_logger(level="INFO", format="json")
    assert logger is not None
    assert logging.getLogger().level == logging.INFO


def test_new_logger_text_format() -> None:
    """テキストフォーマットのロガーが作成できること。"""
    logger = new_logger(level="DEBUG", format="text")
    assert logger is not None
    assert logging.getLogger().level == logging.DEBUG


def test_new_logger_unknown_level_falls_back_to_info() -> None:
    """不明なレベル指定は INFO になること。"""
    new_logger(level="verbose")
    assert logging.getLogger().level == logging.INFO


def test_configure_logging_binds_app_context() -> None:
    """GateConfig のアプリ情報が contextvars に束縛されること。"""
    config = GateConfig.model_validate(
        {
            "app": {"name": "redefynn", "version": "1.2.0", "environment": "production"},
            "log": {"level": "WARNING", "format": "text"},
        }
    )
    configure_logging(config)

    assert structlog.contextvars.get_contextvars() == {
        "app": "redefynn",
        "app_version": "1.2.0",
        "environment": "production",
    }
    assert logging.getLogger().level == logging.WARNING

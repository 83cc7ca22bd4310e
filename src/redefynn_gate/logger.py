"""structlog ベースのロガー設定

ゲートの各モジュールは ``structlog.get_logger(__name__)`` でロガーを取得する。
ここではその出力先と形式を ``GateConfig.log`` に従って一度だけ設定する。
"""

from __future__ import annotations

import logging
import sys

import structlog

from .config import GateConfig

ROOT_LOGGER_NAME = "redefynn_gate"


def _processors(format: str) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if format == "json":
        # JSON ではトレースバックを文字列化してから出力する
        chain += [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        chain.append(structlog.dev.ConsoleRenderer())
    return chain


def new_logger(level: str = "INFO", format: str = "json") -> structlog.stdlib.BoundLogger:
    """structlog と標準 logging を設定し、ゲートのロガーを返す。

    Args:
        level: ログレベル ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        format: 出力形式 ("json" or "text")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    # basicConfig は二度目以降は何もしないため、レベルは毎回設定する
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=_processors(format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.get_logger(ROOT_LOGGER_NAME)


def configure_logging(config: GateConfig) -> structlog.stdlib.BoundLogger:
    """GateConfig からロガーを設定し、アプリ情報をすべてのログに付与する。

    ``app``・``app_version``・``environment`` は contextvars に束縛されるため、
    セキュリティイベントを含む全モジュールのログに出力される。
    """
    logger = new_logger(level=config.log.level, format=config.log.format)
    structlog.contextvars.bind_contextvars(
        app=config.app.name,
        app_version=config.app.version,
        environment=config.app.environment,
    )
    return logger

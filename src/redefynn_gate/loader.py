"""設定ファイル読み込み"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config import GateConfig
from .exceptions import ConfigError, ConfigErrorCodes
from .models import ValidationResult

# 環境変数 → 設定キーのパス
_ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "REDEFYNN_ENV": ("app", "environment"),
    "REDEFYNN_SUPABASE_URL": ("backend", "url"),
    "REDEFYNN_SUPABASE_ANON_KEY": ("backend", "anon_key"),
    "REDEFYNN_SESSION_TIMEOUT_SECS": ("session", "timeout_secs"),
    "REDEFYNN_RATE_LIMIT_ENABLED": ("features", "rate_limiting_enabled"),
    "REDEFYNN_ENABLE_CSP": ("features", "csp_enabled"),
    "REDEFYNN_LOG_LEVEL": ("log", "level"),
}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """base と override をディープマージして新しい辞書を返す。

    override の値が優先される。リストは置換（マージしない）。
    """
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=ConfigErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """環境変数から上書き用の辞書を組み立てる。"""
    data: dict[str, Any] = {}
    for name, (section, key) in _ENV_OVERRIDES.items():
        value = environ.get(name)
        if value is None or value == "":
            continue
        data.setdefault(section, {})[key] = value
    return data


def load_config(
    base_path: Path | None = None,
    env_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> GateConfig:
    """設定ファイルを読み込んで GateConfig を返す。

    base_path: ベース設定ファイルパス。None の場合はデフォルト値のみ。
    env_path: 環境別設定ファイルパス（オプション）。存在する場合はベースにマージ。
    environ: 環境変数（デフォルトは os.environ）。最後にマージされる。
    """
    data: dict[str, Any] = {}
    if base_path is not None:
        data = _read_yaml(base_path)
    if env_path is not None and env_path.exists():
        data = deep_merge(data, _read_yaml(env_path))
    data = deep_merge(data, _env_overrides(os.environ if environ is None else environ))
    try:
        return GateConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=ConfigErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e


def validate_environment(config: GateConfig) -> ValidationResult:
    """バックエンド接続設定を検証する。"""
    errors: list[str] = []
    if not config.backend.url:
        errors.append("Backend URL is required")
    if not config.backend.anon_key:
        errors.append("Backend anon key is required")
    if config.backend.url and not config.backend.url.startswith("https://"):
        errors.append("Backend URL must use HTTPS")
    return ValidationResult(is_valid=not errors, errors=tuple(errors))

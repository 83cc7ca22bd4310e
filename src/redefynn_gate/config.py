"""設定型定義（pydantic BaseModel）"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .models import RateLimitPolicy


class AppSection(BaseModel):
    """アプリケーション基本設定。"""

    name: str = "redefynn"
    version: str = "0.1.0"
    environment: Literal["development", "production"] = "development"


class BackendSection(BaseModel):
    """ホスト型バックエンド（認証 + データベース）接続設定。"""

    url: str = ""
    anon_key: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0)


class RateLimitSection(BaseModel):
    """レート制限ポリシー 1 件。"""

    max_attempts: int = Field(ge=1)
    window_secs: float = Field(gt=0)

    def to_policy(self) -> RateLimitPolicy:
        return RateLimitPolicy(max_attempts=self.max_attempts, window_secs=self.window_secs)


class RateLimitsSection(BaseModel):
    """操作ごとのレート制限。"""

    sign_in: RateLimitSection = Field(
        default_factory=lambda: RateLimitSection(max_attempts=5, window_secs=15 * 60)
    )
    sign_up: RateLimitSection = Field(
        default_factory=lambda: RateLimitSection(max_attempts=3, window_secs=15 * 60)
    )
    password_reset: RateLimitSection = Field(
        default_factory=lambda: RateLimitSection(max_attempts=3, window_secs=60 * 60)
    )
    application_submit: RateLimitSection = Field(
        default_factory=lambda: RateLimitSection(max_attempts=3, window_secs=60 * 60)
    )
    general: RateLimitSection = Field(
        default_factory=lambda: RateLimitSection(max_attempts=100, window_secs=60)
    )


class InputLimits(BaseModel):
    """入力値の長さ・範囲制限。

    applications テーブルの想定スキーマに合わせた値。スキーマ側を変更した
    場合は schema_version を上げる。
    """

    schema_version: int = 1
    email_max_length: int = 254
    password_min_length: int = 8
    password_max_length: int = 128
    name_min_length: int = 2
    name_max_length: int = 100
    age_min: int = 18
    age_max: int = 120
    address_min_length: int = 10
    address_max_length: int = 500
    annual_income_max_length: int = 50
    job_description_min_length: int = 10
    job_description_max_length: int = 1000


class SessionSection(BaseModel):
    """セッション監視設定。"""

    timeout_secs: float = Field(default=30 * 60, gt=0)
    warning_lead_secs: float = Field(default=5 * 60, ge=0)
    inactivity_timeout_secs: float = Field(default=30 * 60, gt=0)
    poll_interval_secs: float = Field(default=1.0, gt=0)


class FeaturesSection(BaseModel):
    """機能フラグ。"""

    rate_limiting_enabled: bool = True
    security_logging: bool = True
    csp_enabled: bool = False


class ErrorMessagesSection(BaseModel):
    """ユーザー表示用の固定メッセージ。"""

    unexpected: str = "An unexpected error occurred"
    fallback: str = "An error occurred. Please try again"
    duplicate: str = "This record already exists"
    permission: str = "You do not have permission to perform this action"
    network: str = "Network connection error. Please try again"
    timeout: str = "Request timed out. Please try again"
    invalid_reset_link: str = "This password reset link is invalid or has expired."


class CspSection(BaseModel):
    """Content Security Policy 設定。"""

    report_uri: str = "/api/csp-report"


class LogSection(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class GateConfig(BaseModel):
    """gate 設定全体。"""

    app: AppSection = Field(default_factory=AppSection)
    backend: BackendSection = Field(default_factory=BackendSection)
    rate_limits: RateLimitsSection = Field(default_factory=RateLimitsSection)
    input_limits: InputLimits = Field(default_factory=InputLimits)
    session: SessionSection = Field(default_factory=SessionSection)
    features: FeaturesSection = Field(default_factory=FeaturesSection)
    error_messages: ErrorMessagesSection = Field(default_factory=ErrorMessagesSection)
    csp: CspSection = Field(default_factory=CspSection)
    log: LogSection = Field(default_factory=LogSection)

    def is_production(self) -> bool:
        return self.app.environment == "production"

    def is_development(self) -> bool:
        return self.app.environment == "development"


DEFAULT_INPUT_LIMITS = InputLimits()
DEFAULT_ERROR_MESSAGES = ErrorMessagesSection()

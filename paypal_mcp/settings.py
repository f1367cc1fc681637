"""
Server settings loaded from the environment
"""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SANDBOX_API_BASE = 'https://api-m.sandbox.paypal.com'

LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class PayPalSettings(BaseSettings):
    """PayPal credentials and server options

    Reads PAYPAL_CLIENT_ID, PAYPAL_CLIENT_SECRET, PAYPAL_API_BASE and
    PAYPAL_LOG_LEVEL from the environment or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix='PAYPAL_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    client_id: str = Field(min_length=1, description='PayPal REST app client ID')
    client_secret: SecretStr = Field(description='PayPal REST app client secret')
    api_base: str = Field(default=SANDBOX_API_BASE, min_length=8, description='PayPal API base URL')
    log_level: LogLevel = Field(default='INFO', description='Logging level for stderr output')

    @field_validator('client_secret')
    @classmethod
    def _secret_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError('client_secret must not be empty')
        return value

    @field_validator('api_base')
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip('/')

    @field_validator('log_level', mode='before')
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

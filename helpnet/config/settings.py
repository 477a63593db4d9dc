"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from eth_account import Account
from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from helpnet.config.constants import (
    COUNTER_LOOKBACK_BLOCKS,
    MAX_BLOCK_RANGE,
    SEPOLIA_CHAIN_ID,
    SYNC_POLL_INTERVAL_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Blockchain RPC Providers
    rpc_url: str
    rpc_url_alternative: str
    expected_chain_id: int = SEPOLIA_CHAIN_ID

    # Contract
    contract_address: str
    contract_deployment_block: int = Field(default=7989112, ge=0)

    # Owner wallet (signs privileged contract calls)
    owner_private_key: str

    # Redis (counter cache)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0
    counter_cache_prefix: str = ""

    # Synchronization
    sync_poll_interval_seconds: int = Field(
        default=SYNC_POLL_INTERVAL_SECONDS,
        gt=0,
        description="Seconds between scheduled sync passes"
    )
    max_block_range: int = Field(
        default=MAX_BLOCK_RANGE,
        gt=0,
        description="Max blocks per log fetch"
    )
    counter_lookback_blocks: int = Field(
        default=COUNTER_LOOKBACK_BLOCKS,
        ge=0,
        description="Cold start counter replay cap (blocks)"
    )

    # HTTP
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    health_check_port: int = 8081

    # Application
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_rpc_urls(self) -> 'Settings':
        """Both RPC endpoints are required for failover."""
        if not self.rpc_url.strip() or not self.rpc_url_alternative.strip():
            raise ValueError(
                'RPC_URL and RPC_URL_ALTERNATIVE must both be set'
            )
        if self.rpc_url == self.rpc_url_alternative:
            logger.warning(
                'RPC_URL_ALTERNATIVE equals RPC_URL, failover will reuse '
                'the same endpoint'
            )
        return self

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production' and self.debug:
            raise ValueError(
                'DEBUG must be False in production environment. '
                'Set DEBUG=false in your .env file.'
            )
        return self

    @field_validator('contract_address')
    @classmethod
    def validate_contract_address(cls, v: str) -> str:
        """Validate contract address format."""
        if not v.startswith('0x') or len(v) != 42:
            raise ValueError(
                f'Invalid contract address: {v}. '
                'Must start with 0x and be 42 characters long.'
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f'Invalid contract address format: {v}') from exc
        return v.lower()

    @field_validator('owner_private_key')
    @classmethod
    def validate_owner_private_key(cls, v: str) -> str:
        """Validate owner private key (64 hex chars, optional 0x)."""
        key = v.strip()
        body = key[2:] if key.startswith('0x') else key
        if len(body) != 64:
            raise ValueError('OWNER_PRIVATE_KEY must be 32 bytes of hex')
        try:
            int(body, 16)
        except ValueError as exc:
            raise ValueError('OWNER_PRIVATE_KEY is not valid hex') from exc
        return key

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql:// or postgresql+asyncpg://'
            )
        return v

    @property
    def async_database_url(self) -> str:
        """Database URL with the asyncpg driver."""
        if self.database_url.startswith('postgresql://'):
            return self.database_url.replace(
                'postgresql://', 'postgresql+asyncpg://', 1
            )
        return self.database_url

    @property
    def owner_address(self) -> str:
        """Owner wallet address derived from the private key (lowercase)."""
        return Account.from_key(self.owner_private_key).address.lower()


# Global settings instance
settings = Settings()

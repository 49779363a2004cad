from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "RemixFlow"
    API_V1_STR: str = "/api"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Key-value store
    REDIS_URL: str = "redis://localhost:6379/0"

    # OpenAI-compatible completion API
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str | None = None
    MODEL_DEFAULT: str = "gpt-4o"
    IMAGE_MODEL: str = "dall-e-3"
    IMAGE_SIZE: str = "1024x1024"

    # Pinning service
    PINATA_JWT: str = ""
    PINATA_API_URL: str = "https://api.pinata.cloud"
    IPFS_GATEWAY: str = "https://gateway.pinata.cloud/ipfs/"
    PUBLIC_APP_URL: str = "https://remixflow.app"

    # EVM chain (Base mainnet by default)
    RPC_URL: str = ""
    CHAIN_ID: int = 8453
    PRIVATE_KEY: str = ""
    ROYALTY_SPLITTER_ADDRESS: str = ""
    REMIX_PROVENANCE_ADDRESS: str = ""
    TX_RECEIPT_TIMEOUT: int = 120
    # Substitute a placeholder tx hash when a configured chain write fails.
    ONCHAIN_FAILURE_FALLBACK: bool = False

    # Fixed-window API rate limit
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW: int = 60 * 60

    @computed_field  # type: ignore[prop-decorator]
    @property
    def onchain_enabled(self) -> bool:
        return bool(
            self.RPC_URL
            and self.PRIVATE_KEY
            and self.ROYALTY_SPLITTER_ADDRESS
            and self.REMIX_PROVENANCE_ADDRESS
        )


settings = Settings()  # type: ignore

"""
Core configuration and settings for the Yarn Review Service
"""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service information
    service_name: str = Field(default="yarn-review-service")
    service_version: str = Field(default="1.0.0")
    api_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=8000)
    host: str = Field(default="0.0.0.0")

    # Database configuration
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="yarnReviewData")
    mongodb_auth_source: str = Field(default="admin")

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL"""
        if self.mongodb_username and self.mongodb_password:
            return (
                f"mongodb://{self.mongodb_username}:{self.mongodb_password}"
                f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"
                f"?authSource={self.mongodb_auth_source}"
            )
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: str = Field(default="logs/yarn-review-service.log")

    # Request tracing
    correlation_id_header: str = Field(default="X-Correlation-ID")

    # JWT Authentication configuration
    jwt_secret: str = Field(default="your_jwt_secret_key")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration: int = Field(default=86400)  # seconds

    # Author ids allowed to run administrative operations (consistency repair).
    # Matched against the token subject, never the handle claim
    admin_ids: List[str] = Field(default_factory=list)

    # Credential hashing
    password_hash_iterations: int = Field(default=240000)

    # Review rules
    rating_min: int = Field(default=1)
    rating_max: int = Field(default=5)
    rating_update_max_retries: int = Field(default=3)


# Global config instance
config = Config()

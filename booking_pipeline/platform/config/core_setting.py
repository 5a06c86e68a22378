import os
from pathlib import Path
from typing import List

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Ticket Booking Pipeline'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL Configuration
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'booking_pipeline'

    # Connection Pool Configuration
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for a pooled connection
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Kafka Instance Configuration
    KAFKA_CONSUMER_INSTANCE_ID: str = os.getenv(
        'KAFKA_CONSUMER_INSTANCE_ID', f'consumer-{os.getpid()}'
    )

    # Kafka Configuration
    KAFKA_BOOTSTRAP_SERVERS: str = 'localhost:9092'
    KAFKA_BOOKING_TOPIC: str = 'booking'
    KAFKA_ORDER_CONSUMER_GROUP: str = 'order-service'
    KAFKA_CONSUMER_AUTO_OFFSET_RESET: str = 'earliest'
    KAFKA_TOTAL_PARTITIONS: int = 12
    KAFKA_REPLICATION_FACTOR: int = 1  # Set to 1 for development, 3 for production
    KAFKA_PUBLISH_TIMEOUT_SECONDS: float = 5.0  # Max wait for broker ack (acks=all)

    # Inventory Service (consumed by booking and order services)
    INVENTORY_SERVICE_URL: str = 'http://localhost:8001'
    INVENTORY_READ_TIMEOUT_SECONDS: float = 2.0  # Admission check, fails closed on timeout
    INVENTORY_DECREMENT_TIMEOUT_SECONDS: float = 5.0  # Fulfillment, retried on timeout

    # Retry-After hint (seconds) sent with every 503 response
    SERVICE_UNAVAILABLE_RETRY_AFTER_SECONDS: int = Field(default=1, ge=0)

    # Order Consumer Retry (transient inventory or database failures)
    ORDER_CONSUMER_RETRY_ATTEMPTS: int = Field(default=3, ge=1)  # 0 would never call the handler
    ORDER_CONSUMER_RETRY_BACKOFF_SECONDS: float = 0.5  # Doubled on every attempt


settings = Settings()  # type: ignore

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    media_root: str = "media"
    media_url: str = "/media"

    # AUTH PROVIDER
    auth_provider_url: str = "http://localhost:9999"
    auth_provider_api_key: str = ""
    owner_auth_id: str | None = None
    auth_cache_ttl: int = 60

    # REDIS
    redis_scheme: str = "redis"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db_index: int = 0

    # RABBITMQ
    rabbitmq_user: str = "guest"
    rabbitmq_password: str = "guest"
    rabbitmq_host: str = "localhost"
    rabbitmq_port: int = 5672
    notifications_queue: str = "automarket_notifications"

    #DB
    mysql_user: str = "automarket"
    mysql_password: str = "automarket"
    mysql_database: str = "automarket"
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    database_url: str | None = None

    # BUSINESS RULES
    max_photos_per_car: int = 15
    user_active_listing_limit: int = 1
    bulk_import_limit: int = 50

    @property
    def redis_url(self) -> str:
        return (
            f"{self.redis_scheme}://{self.redis_host}"
            f":{self.redis_port}/{self.redis_db_index}"
        )

    @property
    def rabbitmq_url(self) -> str:
        return (
            f"amqp://{self.rabbitmq_user}:{self.rabbitmq_password}"
            f"@{self.rabbitmq_host}:{self.rabbitmq_port}/"
        )

    @property
    def automarket_db_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+asyncmy://{self.mysql_user}:{self.mysql_password}"
            f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}"
        )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

settings = Settings()

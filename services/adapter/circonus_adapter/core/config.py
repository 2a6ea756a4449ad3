from shared.config import BaseServiceConfig


class Settings(BaseServiceConfig):
    otel_service_name: str = "circonus_adapter"

    # Configuration documents
    config_directory: str = "/etc/circonus-adapter/config"
    config_refresh_interval_seconds: float = 10.0
    config_initial_load_retries: int = 3
    config_initial_load_base_delay_seconds: float = 0.5


settings = Settings()

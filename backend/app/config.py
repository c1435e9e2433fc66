from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "SolarCalc"
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    json_logs: bool = False

    # Open-Meteo historical archive
    open_meteo_archive_url: str = "https://archive-api.open-meteo.com/v1/archive"
    irradiance_reference_year: int = 2023
    irradiance_timeout_seconds: float = 30.0
    irradiance_max_attempts: int = 3
    irradiance_retry_base_delay: float = 1.0
    min_valid_months: int = 10

    # LocationIQ reverse geocoding; lookups are skipped without a key
    locationiq_reverse_url: str = "https://us1.locationiq.com/v1/reverse.php"
    locationiq_api_key: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()

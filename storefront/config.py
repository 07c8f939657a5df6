from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    upstream_base_url: str = Field("https://fakestoreapi.com")
    # first wire id handed to a locally created product
    local_id_offset: int = Field(10000, ge=0)
    api_base_url: str = Field("http://127.0.0.1:8085")
    request_timeout: float = Field(10.0, gt=0)
    notice_seconds: float = Field(2.0, ge=0)
    log_level: str = Field("INFO")

    model_config = SettingsConfigDict(env_prefix="STOREFRONT_", env_file=".env", extra="ignore")


settings = Settings()

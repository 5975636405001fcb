from typing import List, Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    IMAGE_MAX_TOKENS: int = 1000
    SERPAPI_KEY: Optional[str] = None
    LOCATION: str = "United States"
    PRICE_PROVIDERS: str = "google_shopping,ebay,walmart"
    PRICE_SIMULATION_SEED: Optional[int] = None
    DATABASE_URL: str = "sqlite+aiosqlite:///./scamscan.db"
    DATABASE_ECHO: bool = False
    HTTP_TIMEOUT: float = 10.0
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'

    @property
    def price_provider_list(self) -> List[str]:
        return [p.strip() for p in self.PRICE_PROVIDERS.split(",") if p.strip()]

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()

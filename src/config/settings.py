from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://127.0.0.1:27017"
    MONGO_DATABASE: str = "solestyle"

    JWT_SECRET_KEY: str
    JWT_LIFETIME_SECONDS: int = 3600
    JWT_AUDIENCE: str = "solestyle:auth"
    PASSWORD_HASH_ROUNDS: int = 10

    CLIENT_ORIGIN: str = "*"
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins(self) -> List[str]:
        # "http://localhost:3000,https://shop.example.com" -> ["http://localhost:3000", ...]
        return [origin.strip() for origin in self.CLIENT_ORIGIN.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True


# create a singleton instance
settings = Settings()

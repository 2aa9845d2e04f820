from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront import __version__


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DEBUG: bool = False
    APP_NAME: str = "storefront"
    APP_DATABASE_DSN: str = "sqlite:////tmp/storefront.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Coupon policy
    MAX_ACTIVE_COUPONS_PER_MERCHANT: int = 5
    ENFORCE_CAP_ON_ACTIVATE: bool = False
    GUARD_COUPON_DELETE: bool = True

    @property
    def version(self) -> str:
        return __version__


settings = Settings()

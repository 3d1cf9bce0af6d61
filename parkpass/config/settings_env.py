from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Development
    DEV_MODE: bool = Field(default=True, description="Enable debug mode")

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./parkpass.db", description="Database connection URL")
    ASYNC_DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./parkpass.db", description="Async database URL")

    # Snapshot storage
    STORAGE_KEY: str = Field(default="parkpass_database", description="Key the ledger snapshot is stored under")
    SEED_DEMO_DATA: bool = Field(default=True, description="Load the demo snapshot when nothing is stored yet")

    # Ledger rules
    MAX_VEHICLES_PER_CUSTOMER: int = Field(default=3, ge=1, description="Vehicles a customer may register")
    ENFORCE_CAPACITY: bool = Field(default=False, description="Reject bookings on spots with no free slot")


# Create settings instance
settings = Settings()

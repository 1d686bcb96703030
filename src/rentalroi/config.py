# src/rentalroi/config.py
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # outputs
    OUTPUT_DIR: str = Field(default="outputs")
    DRAFTS_FILE: str = Field(default="outputs/drafts.json")

    # presentation
    DISPLAY_CURRENCY: str = Field(default="IDR")
    PERCENT_DISPLAY_CAP: float = Field(default=999.0)

    model_config = SettingsConfigDict(
        env_prefix="ROI_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", "DISPLAY_CURRENCY", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("PERCENT_DISPLAY_CAP", mode="before")
    @classmethod
    def _cap_positive(cls, v):
        f = float(v)
        if f <= 0:
            raise ValueError("PERCENT_DISPLAY_CAP must be > 0")
        return f


config = AppConfig()

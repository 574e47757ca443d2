from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CalcSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CALC_", env_file=".env", extra="ignore")

    # Manual leverage override (slider bounds)
    LEVERAGE_MIN: float = Field(default=1.0, gt=0)
    LEVERAGE_MAX: float = Field(default=100.0, gt=0)

    # Margin written back by the override is rounded to this many decimals
    MARGIN_DECIMALS: int = Field(default=2, ge=0)


@lru_cache
def get_settings() -> CalcSettings:
    return CalcSettings()

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Markup defaults. A value of 0 means "not configured"
    GLOBAL_MARKUP_DEFAULT: float = 0.0
    MINIMUM_MARKUP: float = 0.0
    # Per-component defaults: fabric, material and options vs. make-up labor
    MATERIAL_MARKUP_DEFAULT: float = 0.0
    LABOR_MARKUP_DEFAULT: float = 0.0

    # Profit status buckets (gross margin %)
    PROFIT_LOW_THRESHOLD: float = 20.0
    PROFIT_GOOD_THRESHOLD: float = 40.0

    ROUNDING_DECIMALS: int = 2

    # Legacy grids with any dimension >= this are assumed to be in mm
    GRID_MM_INFERENCE_THRESHOLD: float = 500.0

    # Increment when any formula changes
    ALGORITHM_VERSION: str = "1.0.0"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="WORKROOM_", extra="ignore")


settings = Settings()

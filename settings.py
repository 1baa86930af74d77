from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_dir: Path = Path("./data")
    tenant_id: str = "local"
    preview_scale: float = 1.0
    custom_suffix: str = " (Custom)"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ITE_",
        env_file_encoding="utf-8",
    )

    @field_validator("preview_scale")
    @classmethod
    def scale_must_be_fraction(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("preview_scale must be greater than 0.0 and at most 1.0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log_level '{v}'")
        return level

    @property
    def presets_dir(self) -> Path:
        return self.project_dir / "presets"

    @property
    def invoices_dir(self) -> Path:
        return self.project_dir / "invoices"

    @property
    def output_dir(self) -> Path:
        return self.project_dir / "output"

"""Configuration management using pydantic-settings."""

import tomllib
from enum import Enum
from pathlib import Path
from typing import Self

from pydantic import BaseModel, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.due_dates import (
    AdjustedDay,
    Direction,
    DueDateRule,
    FixedDay,
    LastBusinessDay,
    NthBusinessDay,
    default_rules,
)
from .domain.normalize import normalize

CONFIG_PATH = Path("~/.config/doctriage/config.toml").expanduser()
DEFAULT_API_URL = "http://localhost:3001"
DEFAULT_TIMEOUT = 30.0
DEFAULT_UPLOAD_DIR = "~/Documents/doctriage/uploads"
DEFAULT_COMPANIES_FILE = "~/.config/doctriage/companies.yaml"
DEFAULT_HOLIDAYS = ["01-01", "04-21", "05-01", "09-07", "10-12", "11-02", "11-15", "12-25"]


def default_category_keywords() -> dict[str, list[str]]:
    return {
        "FGTS": ["fgts mensal"],
        "Folha de Pagamento": ["extrato mensal"],
        "Parcelamento": ["parcelamento"],
        "Simples Nacional": ["simples nacional", "das"],
        "INSS": ["cp seguros", "cp segurados"],
        "Notas Fiscais": ["nota fiscal"],
        "Honorários": ["um banco", "cora.com.br"],
    }


def parse_holiday(text: str) -> tuple[int, int]:
    """Parse "MM-DD" into (month, day)."""
    try:
        month_str, day_str = text.split("-")
        month, day = int(month_str), int(day_str)
    except ValueError:
        raise ValueError(f"Holiday must be MM-DD, got {text!r}") from None
    # Allows 02-29
    days_in_month = [31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
    if not 1 <= month <= 12 or not 1 <= day <= days_in_month[month - 1]:
        raise ValueError(f"Not a calendar day: {text!r}")
    return month, day


class RuleKind(str, Enum):
    FIXED_DAY = "fixed_day"
    NTH_BUSINESS_DAY = "nth_business_day"
    ADJUSTED_DAY = "adjusted_day"
    LAST_BUSINESS_DAY = "last_business_day"


class RuleConfig(BaseModel):
    """Due-date rule bound to a category.

    For nth_business_day, `day` is the business-day count.
    """

    kind: RuleKind
    day: int = 1
    direction: Direction = Direction.FORWARD

    @model_validator(mode="after")
    def check_day(self) -> Self:
        if self.kind == RuleKind.NTH_BUSINESS_DAY and not 1 <= self.day <= 23:
            raise ValueError(f"nth_business_day must be 1..23, got {self.day}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"day must be 1..31, got {self.day}")
        return self

    def to_rule(self) -> DueDateRule:
        if self.kind == RuleKind.FIXED_DAY:
            return FixedDay(self.day)
        elif self.kind == RuleKind.NTH_BUSINESS_DAY:
            return NthBusinessDay(self.day)
        elif self.kind == RuleKind.ADJUSTED_DAY:
            return AdjustedDay(self.day, self.direction)
        else:
            return LastBusinessDay()

    @classmethod
    def from_rule(cls, rule: DueDateRule) -> "RuleConfig":
        if isinstance(rule, FixedDay):
            return cls(kind=RuleKind.FIXED_DAY, day=rule.day)
        if isinstance(rule, NthBusinessDay):
            return cls(kind=RuleKind.NTH_BUSINESS_DAY, day=rule.n)
        if isinstance(rule, AdjustedDay):
            return cls(kind=RuleKind.ADJUSTED_DAY, day=rule.day, direction=rule.direction)
        return cls(kind=RuleKind.LAST_BUSINESS_DAY)


def default_rule_configs() -> dict[str, RuleConfig]:
    return {category: RuleConfig.from_rule(rule) for category, rule in default_rules().items()}


class ClassificationConfig(BaseSettings):
    """Keyword map and tie-break priorities."""

    model_config = SettingsConfigDict(env_prefix="DOCTRIAGE_CLASSIFICATION_")

    category_keywords: dict[str, list[str]] = default_category_keywords()
    priority_categories: list[str] = []

    @field_validator("category_keywords")
    @classmethod
    def check_keywords(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        cleaned = {}
        for category, keywords in v.items():
            phrases = [k.strip() for k in keywords if k and k.strip()]
            for phrase in phrases:
                if len(normalize(phrase)) < 3:
                    raise ValueError(f"Keyword too short for {category}: {phrase!r}")
            if not phrases:
                raise ValueError(f"No keywords configured for {category}")
            cleaned[category] = phrases
        return cleaned

    @field_validator("priority_categories")
    @classmethod
    def check_priorities(cls, v: list[str]) -> list[str]:
        if len(set(v)) != len(v):
            raise ValueError("priority_categories must not repeat a category")
        return v


class DueDatesConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DOCTRIAGE_DUE_DATES_")

    holidays: list[str] = DEFAULT_HOLIDAYS
    rules: dict[str, RuleConfig] = default_rule_configs()

    @field_validator("holidays")
    @classmethod
    def check_holidays(cls, v: list[str]) -> list[str]:
        for holiday in v:
            parse_holiday(holiday)
        return v

    def holiday_table(self) -> frozenset[tuple[int, int]]:
        return frozenset(parse_holiday(h) for h in self.holidays)

    def rule_table(self) -> dict[str, DueDateRule]:
        return {category: rule.to_rule() for category, rule in self.rules.items()}


class UploadBackend(str, Enum):
    HTTP = "http"
    FILESYSTEM = "filesystem"


class UploadConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DOCTRIAGE_UPLOAD_")

    backend: UploadBackend = UploadBackend.HTTP
    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    directory: Path = Path(DEFAULT_UPLOAD_DIR)

    @field_validator("directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()


class RegistryBackend(str, Enum):
    HTTP = "http"
    YAML = "yaml"


class RegistryConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DOCTRIAGE_REGISTRY_")

    backend: RegistryBackend = RegistryBackend.HTTP
    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    path: Path = Path(DEFAULT_COMPANIES_FILE)

    @field_validator("path", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DOCTRIAGE_")

    classification: ClassificationConfig = ClassificationConfig()
    due_dates: DueDatesConfig = DueDatesConfig()
    upload: UploadConfig = UploadConfig()
    registry: RegistryConfig = RegistryConfig()


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults."""
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        classification = ClassificationConfig(**data.get("classification", {}))
        due_dates = DueDatesConfig(**data.get("due_dates", {}))
        upload = UploadConfig(**data.get("upload", {}))
        registry = RegistryConfig(**data.get("registry", {}))
        return Settings(
            classification=classification,
            due_dates=due_dates,
            upload=upload,
            registry=registry,
        )

    return Settings()

"""Unit tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from doctriage.config import (
    ClassificationConfig,
    DueDatesConfig,
    RegistryBackend,
    RuleConfig,
    RuleKind,
    UploadBackend,
    load_settings,
    parse_holiday,
)
from doctriage.domain.due_dates import (
    NATIONAL_HOLIDAYS,
    AdjustedDay,
    Direction,
    LastBusinessDay,
    NthBusinessDay,
    default_rules,
)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_when_file_missing(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.toml")
        assert settings.upload.backend == UploadBackend.HTTP
        assert settings.registry.backend == RegistryBackend.HTTP
        assert settings.classification.priority_categories == []
        assert "FGTS" in settings.classification.category_keywords
        assert settings.due_dates.rule_table() == default_rules()
        assert settings.due_dates.holiday_table() == NATIONAL_HOLIDAYS

    def test_default_path_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import doctriage.__main__
        import doctriage.config

        monkeypatch.setattr(doctriage.config, "CONFIG_PATH", tmp_path / "config.toml")
        settings = load_settings()

        assert doctriage.__main__.cli is not None
        assert settings.due_dates.holidays == DueDatesConfig().holidays
        assert settings.due_dates.holiday_table() == NATIONAL_HOLIDAYS

    def test_reads_toml(self, tmp_path: Path) -> None:
        config = tmp_path / "config.toml"
        config.write_text(
            """
[classification]
priority_categories = ["INSS", "FGTS"]

[classification.category_keywords]
FGTS = ["fgts mensal", "guia do fgts"]
INSS = ["cp segurados"]

[due_dates]
holidays = ["01-01", "11-20"]

[due_dates.rules.FGTS]
kind = "adjusted_day"
day = 7
direction = "backward"

[due_dates.rules.Parcelamento]
kind = "last_business_day"

[upload]
backend = "filesystem"
directory = "~/uploads"

[registry]
backend = "yaml"
path = "/srv/companies.yaml"
""",
            encoding="utf-8",
        )
        settings = load_settings(config)

        assert settings.classification.priority_categories == ["INSS", "FGTS"]
        assert settings.classification.category_keywords["FGTS"] == [
            "fgts mensal",
            "guia do fgts",
        ]
        assert settings.due_dates.holiday_table() == {(1, 1), (11, 20)}
        assert settings.due_dates.rule_table() == {
            "FGTS": AdjustedDay(7, Direction.BACKWARD),
            "Parcelamento": LastBusinessDay(),
        }
        assert settings.upload.backend == UploadBackend.FILESYSTEM
        assert settings.upload.directory == Path("~/uploads").expanduser()
        assert settings.registry.backend == RegistryBackend.YAML
        assert settings.registry.path == Path("/srv/companies.yaml")


class TestClassificationConfig:
    """Tests for keyword validation."""

    def test_strips_and_drops_blank_keywords(self) -> None:
        config = ClassificationConfig(category_keywords={"FGTS": ["  fgts mensal ", "", "  "]})
        assert config.category_keywords == {"FGTS": ["fgts mensal"]}

    def test_rejects_short_keyword(self) -> None:
        with pytest.raises(ValidationError, match="too short"):
            ClassificationConfig(category_keywords={"INSS": ["cp"]})

    def test_rejects_category_without_keywords(self) -> None:
        with pytest.raises(ValidationError, match="No keywords"):
            ClassificationConfig(category_keywords={"INSS": []})

    def test_rejects_repeated_priority(self) -> None:
        with pytest.raises(ValidationError, match="repeat"):
            ClassificationConfig(priority_categories=["FGTS", "FGTS"])


class TestRuleConfig:
    """Tests for RuleConfig."""

    def test_nth_business_day(self) -> None:
        rule = RuleConfig(kind=RuleKind.NTH_BUSINESS_DAY, day=5)
        assert rule.to_rule() == NthBusinessDay(5)

    def test_round_trip_defaults(self) -> None:
        for rule in default_rules().values():
            assert RuleConfig.from_rule(rule).to_rule() == rule

    def test_rejects_day_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            RuleConfig(kind=RuleKind.ADJUSTED_DAY, day=32)

    def test_rejects_nth_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            RuleConfig(kind=RuleKind.NTH_BUSINESS_DAY, day=24)


class TestHolidays:
    """Tests for holiday parsing."""

    def test_parse_holiday(self) -> None:
        assert parse_holiday("04-21") == (4, 21)

    @pytest.mark.parametrize("text", ["4/21", "13-01", "02-30", "xx-yy", "0101"])
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_holiday(text)

    def test_config_rejects_invalid_holiday(self) -> None:
        with pytest.raises(ValidationError):
            DueDatesConfig(holidays=["02-30"])

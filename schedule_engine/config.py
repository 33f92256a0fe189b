"""Rule configuration overrides and engine settings."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import time
from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from schedule_engine.rules import DEFAULT_RULES, PARAMS_BY_RULE, Rule, build_parameters

logger = logging.getLogger(__name__)

Severity = Literal["info", "warning", "error"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RuleConfiguration(BaseModel):
    """User overrides produced by a settings screen.

    ``enabled_rules`` lists the rule ids to turn on; when omitted each rule
    keeps its own ``is_enabled`` flag. ``rule_settings`` maps rule ids to
    parameter overrides and ``severities`` maps rule ids to a new severity.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    enabled_rules: Optional[list[str]] = None
    rule_settings: dict[str, dict[str, Any]] = Field(default_factory=dict)
    severities: dict[str, Severity] = Field(default_factory=dict)
    auto_validation: bool = True
    show_suggestions: bool = True

    def unknown_rule_ids(self) -> list[str]:
        named = set(self.enabled_rules or []) | set(self.rule_settings) | set(self.severities)
        return sorted(rule_id for rule_id in named if rule_id not in PARAMS_BY_RULE)

    def apply(self, rules: Optional[Iterable[Rule]] = None) -> list[Rule]:
        """Merge these overrides over ``rules`` (defaults when omitted)."""

        unknown = self.unknown_rule_ids()
        if unknown:
            logger.warning("Ignoring overrides for unknown rule ids: %s", ", ".join(unknown))

        enabled = set(self.enabled_rules) if self.enabled_rules is not None else None
        merged = []
        for rule in DEFAULT_RULES if rules is None else rules:
            merged.append(
                replace(
                    rule,
                    is_enabled=rule.is_enabled if enabled is None else rule.id in enabled,
                    severity=self.severities.get(rule.id, rule.severity),
                    parameters=build_parameters(rule.id, self.rule_settings.get(rule.id), base=rule.parameters),
                )
            )
        return merged


class EngineSettings(BaseSettings):
    """Environment-driven defaults, read from ``SCHEDULE_ENGINE_*`` variables."""

    day_start: time = time(9, 0)
    buffer_minutes: float = Field(default=15, ge=0)
    default_duration_minutes: float = Field(default=50, gt=0)
    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

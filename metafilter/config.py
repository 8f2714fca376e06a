from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from metafilter.core.rules import FilterRule, RuleSet
from metafilter.normalize.catalogs import CATALOGS
from metafilter.normalize.metadata import FIELDS, MetadataFilter, build_filter


class RuleConfig(BaseModel):
    pattern: str
    replacement: str = ""


class FilterConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")
    max_passes: int | None = None
    catalogs: dict[str, list[RuleConfig]] = Field(default_factory=dict)
    pipelines: dict[str, dict[str, list[str]]] = Field(default_factory=dict)

    @field_validator("max_passes")
    @classmethod
    def validate_max_passes(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("max_passes must be >= 1")
        return value

    @field_validator("catalogs")
    @classmethod
    def validate_catalog_names(cls, value: dict[str, list[RuleConfig]]) -> dict[str, list[RuleConfig]]:
        normalized: dict[str, list[RuleConfig]] = {}
        for name, rules in value.items():
            key = name.strip().lower()
            if key in CATALOGS:
                raise ValueError(f"Custom catalog {name!r} shadows a built-in catalog")
            if key in normalized:
                raise ValueError(f"Custom catalog {name!r} is defined more than once")
            normalized[key] = rules
        return normalized

    @field_validator("pipelines")
    @classmethod
    def validate_pipeline_fields(cls, value: dict[str, dict[str, list[str]]]) -> dict[str, dict[str, list[str]]]:
        for name, fields in value.items():
            unknown = sorted(set(fields) - set(FIELDS))
            if unknown:
                raise ValueError(f"Pipeline {name!r} has unknown field(s): {', '.join(unknown)}")
        return value


DEFAULT_CONFIG_PATH = Path("config/default.yaml")


def load_config(path: Path | None = None) -> FilterConfig:
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file does not exist: {config_path}")
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return FilterConfig.model_validate(raw)


def build_catalogs(config: FilterConfig) -> dict[str, RuleSet]:
    return {
        name: tuple(FilterRule(rule.pattern, rule.replacement) for rule in rules)
        for name, rules in config.catalogs.items()
    }


def build_pipeline(config: FilterConfig, name: str) -> MetadataFilter:
    if name not in config.pipelines:
        raise KeyError(f"Unknown pipeline: {name}. Allowed: {', '.join(config.pipelines) or 'none'}")
    return build_filter(config.pipelines[name], extra=build_catalogs(config), max_passes=config.max_passes)

"""Configuration loading with pydantic-settings.

Precedence: kwargs > environment (LOFTSCOPE__SECTION__KEY) > project
``.loftscope/config.yaml`` > global ``~/.config/loftscope/config.yaml`` >
defaults.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from loftscope.config.models import LoftscopeConfig
from loftscope.core.exceptions import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/loftscope/config.yaml").expanduser()
PROJECT_CONFIG_NAME = Path(".loftscope") / "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _merge_sections(current, value)
        merged[key] = value
    return merged


class YamlFilesSource(PydanticBaseSettingsSource):
    """Settings source over a chain of YAML files, later files overriding earlier ones."""

    def __init__(self, settings_cls: type[BaseSettings], paths: tuple[Path, ...]) -> None:
        super().__init__(settings_cls)
        self.data: dict[str, Any] = {}
        for path in paths:
            self.data = _merge_sections(self.data, _load_yaml(path))

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        # Abstract on the base class; __call__ hands over whole sections.
        value = self.data.get(field_name)
        return value, field_name, isinstance(value, dict)

    def __call__(self) -> dict[str, Any]:
        return self.data


def _settings_for(project_root: Path) -> type[BaseSettings]:
    config_files = (GLOBAL_CONFIG_PATH, project_root / PROJECT_CONFIG_NAME)

    class LoftscopeSettings(BaseSettings, LoftscopeConfig):
        """Env vars: LOFTSCOPE__LINTING__ENABLED, LOFTSCOPE__LOGGING__LEVEL, etc."""

        model_config = SettingsConfigDict(
            env_prefix="LOFTSCOPE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource,
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, YamlFilesSource(settings_cls, config_files))

    return LoftscopeSettings


def load_config(project_root: Path | None = None, **kwargs: Any) -> LoftscopeConfig:
    """Load config: defaults < global yaml < project yaml < env vars < kwargs.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    settings_cls = _settings_for(project_root or Path.cwd())
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return LoftscopeConfig.model_validate(settings.model_dump())

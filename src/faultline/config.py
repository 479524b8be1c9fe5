"""
Fault Settings Loading

Builds the decision engine's options from YAML/JSON files or environment
variables. File values may reference the environment with ``${VAR}`` or
``${VAR:default}`` placeholders:

    fault:
      enabled: ${FAULT_ENABLED:false}
      inject_percent: 0.05
      path_blacklist: ["/health", "/ready"]
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from faultline.errors import FaultConfigError
from faultline.fault import DEFAULT_RAND_SEED, Fault
from faultline.injector import Injector
from faultline.logging_config import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "FAULTLINE_"


class FaultSettings(BaseModel):
    """Validated fault options. ``inject_percent`` is deliberately not range-checked."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = False
    inject_percent: float = 0.0
    path_blacklist: List[str] = Field(default_factory=list)
    path_whitelist: List[str] = Field(default_factory=list)
    rand_seed: int = DEFAULT_RAND_SEED

    @field_validator('path_blacklist', 'path_whitelist', mode='before')
    @classmethod
    def split_paths(cls, v):
        """Accept comma separated strings as well as lists."""
        if v is None:
            return []
        if isinstance(v, str):
            return [p.strip() for p in v.split(',') if p.strip()]
        return v


class ConfigLoader:
    """
    Loads configuration files with environment variable substitution.

    Supports placeholders in the format ${VAR_NAME} or ${VAR_NAME:default_value}.
    """

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    @classmethod
    def load_config(cls, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load a YAML or JSON file, chosen by extension.

        Raises:
            FaultConfigError: If the file is missing, unreadable, empty,
                unparsable or of an unsupported extension
        """
        path = Path(path)
        if not path.exists():
            raise FaultConfigError(f"Configuration file not found: {path}",
                                   context={"path": str(path)})

        suffix = path.suffix.lower()
        if suffix not in ('.yaml', '.yml', '.json'):
            raise FaultConfigError(
                f"Unsupported configuration file format: {path.suffix}",
                context={"path": str(path)},
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                if suffix == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FaultConfigError(f"Failed to parse {path}: {e}",
                                   context={"path": str(path)}) from e
        except OSError as e:
            raise FaultConfigError(f"Failed to read {path}: {e}",
                                   context={"path": str(path)}) from e

        if data is None:
            raise FaultConfigError(f"Configuration file is empty: {path}",
                                   context={"path": str(path)})

        return cls._process_env_vars(data)

    @classmethod
    def _process_env_vars(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: cls._process_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._process_env_vars(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_var(data)
        return data

    @classmethod
    def _substitute_env_var(cls, value: str) -> Any:
        """
        Substitute ``${VAR}`` / ``${VAR:default}`` placeholders.

        A value that is exactly one placeholder is type converted
        (bool, int, float); interpolated strings stay strings.
        """
        def replace_match(match):
            var_expr = match.group(1)
            if ':' in var_expr:
                var_name, default_value = var_expr.split(':', 1)
                var_name = var_name.strip()
                default_value = default_value.strip()
            else:
                var_name = var_expr.strip()
                default_value = None

            env_value = os.getenv(var_name)
            if env_value is None:
                if default_value is None:
                    raise FaultConfigError(
                        f"Required environment variable not set: {var_name}",
                        context={"variable": var_name},
                    )
                env_value = default_value
            return env_value

        result = cls.ENV_VAR_PATTERN.sub(replace_match, value)
        if cls.ENV_VAR_PATTERN.fullmatch(value):
            return cls._convert_value(result)
        return result

    @classmethod
    def _convert_value(cls, value: str) -> Any:
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        if '.' not in value and 'e' not in value.lower():
            try:
                return int(value)
            except ValueError:
                pass

        try:
            return float(value)
        except ValueError:
            return value


def _validate(data: Mapping[str, Any], source: str) -> FaultSettings:
    try:
        return FaultSettings(**data)
    except ValidationError as e:
        raise FaultConfigError(
            f"Invalid fault settings from {source}",
            context={"source": source, "errors": e.errors(include_url=False)},
        ) from e


def load_fault_settings(path: Union[str, Path],
                        section: Optional[str] = "fault") -> FaultSettings:
    """
    Load fault settings from a YAML or JSON file.

    Args:
        path: Path to configuration file
        section: Top level key holding the fault options, or ``None`` when
            the whole document is the options mapping

    Returns:
        Validated settings

    Raises:
        FaultConfigError: On any loading or validation failure
    """
    data = ConfigLoader.load_config(path)
    if section is not None:
        if not isinstance(data, dict) or section not in data:
            raise FaultConfigError(f"Section '{section}' not found in {path}",
                                   context={"path": str(path), "section": section})
        data = data[section]
    if not isinstance(data, dict):
        raise FaultConfigError(f"Fault settings in {path} must be a mapping",
                               context={"path": str(path)})

    settings = _validate(data, str(path))
    logger.info("fault_config_loaded", source=str(path), enabled=settings.enabled)
    return settings


def settings_from_env(prefix: str = ENV_PREFIX,
                      environ: Optional[Mapping[str, str]] = None) -> FaultSettings:
    """
    Read fault settings from environment variables.

    Recognized names (with the default prefix): FAULTLINE_ENABLED,
    FAULTLINE_INJECT_PERCENT, FAULTLINE_PATH_BLACKLIST,
    FAULTLINE_PATH_WHITELIST, FAULTLINE_RAND_SEED. Unset variables keep
    their defaults; path lists are comma separated.
    """
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    for name in FaultSettings.model_fields:
        key = f"{prefix}{name.upper()}"
        if key in environ:
            data[name] = environ[key]

    settings = _validate(data, "environment")
    logger.info("fault_config_loaded", source="environment", enabled=settings.enabled)
    return settings


def build_fault(settings: FaultSettings, injector: Optional[Injector]) -> Fault:
    """Construct the decision engine from validated settings."""
    return Fault(
        injector,
        enabled=settings.enabled,
        inject_percent=settings.inject_percent,
        path_blacklist=settings.path_blacklist,
        path_whitelist=settings.path_whitelist,
        rand_seed=settings.rand_seed,
    )

"""Configuration: frozen dataclass built from defaults <- YAML file <- env vars."""

import os
from dataclasses import dataclass, fields

import yaml

from lambda_log_shipper.errors import ConfigError


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    logstash_host: str = "localhost"
    logstash_port: int = 5050
    token: str = ""
    connect_timeout: float = 5.0
    aws_region: str | None = None
    metric_chunk_size: int = 20
    publish_usage_metrics: bool = False
    log_level: str = "INFO"


_ENV_VARS = {
    "logstash_host": "LOGSTASH_HOST",
    "logstash_port": "LOGSTASH_PORT",
    "token": "TOKEN",
    "connect_timeout": "CONNECT_TIMEOUT",
    "aws_region": "AWS_REGION",
    "metric_chunk_size": "METRIC_CHUNK_SIZE",
    "publish_usage_metrics": "PUBLISH_USAGE_METRICS",
    "log_level": "LOG_LEVEL",
}

_CONVERTERS = {
    "logstash_port": int,
    "connect_timeout": float,
    "metric_chunk_size": int,
    "publish_usage_metrics": _parse_bool,
    "log_level": lambda v: str(v).upper(),
}


def load_yaml(path: str) -> dict:
    """Load the ``shipper`` section of a YAML config file.

    A missing file yields an empty dict; invalid YAML raises ConfigError.
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        return {}
    section = data.get("shipper", {})
    return section if isinstance(section, dict) else {}


def load_config(config_path: str | None = None) -> Config:
    """Build Config from defaults, then the YAML file, then environment variables.

    The YAML path comes from *config_path* or the ``CONFIG_PATH`` env var.
    """
    config_path = config_path or os.environ.get("CONFIG_PATH")
    raw: dict = load_yaml(config_path) if config_path else {}

    known = {f.name for f in fields(Config)}
    kwargs = {k: v for k, v in raw.items() if k in known}

    for key, env_var in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is not None and value != "":
            kwargs[key] = value

    for key, convert in _CONVERTERS.items():
        if key in kwargs and kwargs[key] is not None:
            try:
                kwargs[key] = convert(kwargs[key])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for {key}: {kwargs[key]!r}") from e

    config = Config(**kwargs)
    if config.metric_chunk_size < 1:
        raise ConfigError("metric_chunk_size must be at least 1")
    return config

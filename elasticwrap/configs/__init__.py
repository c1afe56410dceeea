"""Configuration for elasticwrap"""

from pathlib import Path

from dynaconf import Dynaconf, Validator

# Validators for elasticwrap settings.
_validators = [
    Validator("logging.format", is_in=["mozlog", "pretty"]),
    Validator("logging.level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    Validator("logging.can_propagate", is_type_of=bool),
    Validator("elasticsearch.url", is_type_of=str, must_exist=True),
    Validator("elasticsearch.api_key", is_type_of=str),
    Validator("elasticsearch.max_retries", is_type_of=int, gte=0),
    Validator("elasticsearch.retry_on_timeout", is_type_of=bool),
    Validator("elasticsearch.request_timeout_sec", is_type_of=float, gt=0),
    # Time value understood by the cluster, e.g. "3m" or "90s".
    Validator("scroll.ttl", is_type_of=str, must_exist=True),
    # Total hits per scroll page, across all shards.
    Validator("scroll.page_size_per_shard", is_type_of=int, gte=1, must_exist=True),
    Validator("record_indices", is_type_of=dict),
]

# `root_path` = The directory holding the TOML files below.
# `envvar_prefix` = Export envvars with `export ELASTICWRAP_FOO=bar`.
# `settings_files` = Load these files in the order.
# `environments` = Enable layered environments such as `development`, `production`, `testing`.
# `env_switcher` = Switch environments by `export ELASTICWRAP_ENV=production`. Default: `development`.
# `merge_enabled` = Environment tables extend `[default]` instead of replacing it.
# `validators` = Define validators for elasticwrap settings.

settings = Dynaconf(
    root_path=str(Path(__file__).parent),
    envvar_prefix="ELASTICWRAP",
    settings_files=[
        "default.toml",
        "development.toml",
        "production.toml",
        "testing.toml",
    ],
    environments=True,
    env_switcher="ELASTICWRAP_ENV",
    merge_enabled=True,
    validators=_validators,
)

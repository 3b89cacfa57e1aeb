"""
This module defines the data structures for our configuration.
User overrides, named presets and built-in defaults are merged here into a
single resolved WordpressConfig consumed by the resource builder.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Union

class Preset(str, Enum):
    BASIC = "basic"
    SMALL_BUSINESS = "small-business"
    BUSINESS = "business"

@dataclass
class DatabaseCredentials:
    name: Optional[str] = None
    table_prefix: Optional[str] = None
    username: Optional[str] = None

@dataclass
class AdvancedProps:
    maximum_availability_zones: Optional[int] = None
    nat_gateways: Optional[int] = None
    task_cpu: Optional[int] = None
    task_memory: Optional[int] = None
    desired_task_instance_count: Optional[int] = None
    cpu_threshold: Optional[int] = None
    memory_threshold: Optional[int] = None
    min_capacity: Optional[int] = None
    max_capacity: Optional[int] = None

@dataclass
class ScalingProps:
    min_capacity: Optional[int] = None
    max_capacity: Optional[int] = None
    cpu_threshold: Optional[int] = None
    memory_threshold: Optional[int] = None

@dataclass
class CacheOptions:
    cache_node_type: Optional[str] = None
    number_of_cache_nodes: Optional[int] = None
    engine: Optional[str] = None

@dataclass
class WordpressProps:
    domain_name: Optional[str] = None
    database_credentials: Optional[DatabaseCredentials] = None
    username: Optional[str] = None
    preset: Optional[Preset] = None
    advanced: Optional[AdvancedProps] = None
    scaling: Optional[ScalingProps] = None
    cache: Union[bool, CacheOptions, None] = None
    db_instance_type: Optional[str] = None
    cdn: bool = False
    certificate_arn: Optional[str] = None
    origin_domain_name: Optional[str] = None
    scale_only_above_desired: bool = False

@dataclass(frozen=True)
class CacheConfig:
    node_type: str
    number_of_nodes: int
    engine: str

@dataclass(frozen=True)
class WordpressConfig:
    maximum_availability_zones: int
    nat_gateways: int
    task_cpu: int
    task_memory: int
    desired_task_instance_count: int
    cpu_threshold: int
    memory_threshold: int
    min_capacity: int
    max_capacity: int
    database_name: str
    table_prefix: str
    database_username: str
    username: str
    db_instance_type: str
    cache: Optional[CacheConfig] = None
    domain_name: Optional[str] = None
    cdn: bool = False
    certificate_arn: Optional[str] = None
    origin_domain_name: Optional[str] = None
    scale_only_above_desired: bool = False

PRESETS: Dict[Preset, Dict[str, int]] = {
    Preset.BASIC: {
        "maximum_availability_zones": 1,
        "nat_gateways": 1,
        "task_cpu": 256,
        "task_memory": 1024,
        "desired_task_instance_count": 1,
        "cpu_threshold": 85,
        "memory_threshold": 85,
        "min_capacity": 1,
        "max_capacity": 3,
    },
    Preset.SMALL_BUSINESS: {
        "maximum_availability_zones": 2,
        "nat_gateways": 1,
        "task_cpu": 1024,
        "task_memory": 2048,
        "desired_task_instance_count": 1,
        "cpu_threshold": 75,
        "memory_threshold": 75,
        "min_capacity": 1,
        "max_capacity": 5,
    },
    Preset.BUSINESS: {
        "maximum_availability_zones": 2,
        "nat_gateways": 1,
        "task_cpu": 1024,
        "task_memory": 2048,
        "desired_task_instance_count": 2,
        "cpu_threshold": 75,
        "memory_threshold": 75,
        "min_capacity": 2,
        "max_capacity": 10,
    },
}

DEFAULTS: Dict[str, Any] = {
    "maximum_availability_zones": 1,
    "nat_gateways": 1,
    "task_cpu": 256,
    "task_memory": 1024,
    "desired_task_instance_count": 1,
    "cpu_threshold": 85,
    "memory_threshold": 85,
    "min_capacity": 1,
    "max_capacity": 1,
    "database_name": "wordpress",
    "table_prefix": "wp_",
    "database_username": "wp_user",
    "username": "user",
    # smallest class Aurora MySQL 3 accepts; see DESIGN.md on the default size
    "db_instance_type": "db.t3.medium",
}

CACHE_DEFAULTS: Dict[str, Any] = {
    "node_type": "cache.t2.micro",
    "number_of_nodes": 1,
    "engine": "redis",
}

def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None

def normalize_instance_type(value: Optional[str], prefix: str) -> Optional[str]:
    """Turn 't3.small' or 'T3_SMALL' into '<prefix>.t3.small'."""
    if value is None:
        return None
    value = value.strip()
    if "." not in value and "_" in value:
        value = value.replace("_", ".", 1)
    value = value.lower()
    if not value.startswith(prefix + "."):
        value = f"{prefix}.{value}"
    return value

def resolve_cache(cache: Union[bool, CacheOptions, None]) -> Optional[CacheConfig]:
    if not cache:
        return None
    options = cache if isinstance(cache, CacheOptions) else CacheOptions()
    return CacheConfig(
        node_type=_first(normalize_instance_type(options.cache_node_type, "cache"), CACHE_DEFAULTS["node_type"]),
        number_of_nodes=_first(options.number_of_cache_nodes, CACHE_DEFAULTS["number_of_nodes"]),
        engine=_first(options.engine, CACHE_DEFAULTS["engine"]),
    )

def resolve_config(props: Optional[WordpressProps] = None) -> WordpressConfig:
    """
    Merge overrides, the selected preset and the built-in defaults.

    Precedence per field is scaling > advanced > preset > default. Only None
    counts as unset, so an explicit 0 is kept.
    """
    props = props or WordpressProps()
    advanced = props.advanced or AdvancedProps()
    scaling = props.scaling or ScalingProps()
    credentials = props.database_credentials or DatabaseCredentials()
    preset = PRESETS.get(props.preset, {}) if props.preset is not None else {}

    resolved: Dict[str, Any] = {}
    for field in fields(AdvancedProps):
        key = field.name
        resolved[key] = _first(
            getattr(scaling, key, None),
            getattr(advanced, key),
            preset.get(key),
            DEFAULTS[key],
        )

    return WordpressConfig(
        database_name=_first(credentials.name, DEFAULTS["database_name"]),
        table_prefix=_first(credentials.table_prefix, DEFAULTS["table_prefix"]),
        database_username=_first(credentials.username, DEFAULTS["database_username"]),
        username=_first(props.username, DEFAULTS["username"]),
        db_instance_type=_first(normalize_instance_type(props.db_instance_type, "db"), DEFAULTS["db_instance_type"]),
        cache=resolve_cache(props.cache),
        domain_name=props.domain_name,
        cdn=bool(props.cdn),
        certificate_arn=props.certificate_arn,
        origin_domain_name=props.origin_domain_name,
        scale_only_above_desired=bool(props.scale_only_above_desired),
        **resolved,
    )

def _to_snake(key: str) -> str:
    out = []
    for i, ch in enumerate(key):
        if ch.isupper() and i > 0 and not key[i - 1].isupper():
            out.append("_")
        out.append(ch.lower())
    return "".join(out)

def _section(data: Optional[Dict[str, Any]], cls):
    if data is None:
        return None
    known = {f.name for f in fields(cls)}
    kwargs = {}
    for key, value in data.items():
        snake_key = _to_snake(key)
        if snake_key not in known:
            raise ValueError(f"Unknown key '{key}' for {cls.__name__}")
        kwargs[snake_key] = value
    return cls(**kwargs)

def parse_preset(value: Optional[str]) -> Optional[Preset]:
    if value is None:
        return None
    try:
        return Preset(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in Preset)
        raise ValueError(f"Unknown preset '{value}'. Expected one of: {allowed}")

def props_from_dict(data: Optional[Dict[str, Any]]) -> WordpressProps:
    """Build WordpressProps from the 'wordpress' mapping of config.yaml."""
    data = {_to_snake(k): v for k, v in (data or {}).items()}
    known = {f.name for f in fields(WordpressProps)}
    unknown = sorted(key for key in data if key not in known)
    if unknown:
        raise ValueError(f"Unknown key(s) '{', '.join(unknown)}' for WordpressProps")
    cache = data.get("cache")
    if isinstance(cache, dict):
        cache = _section(cache, CacheOptions)
    return WordpressProps(
        domain_name=data.get("domain_name"),
        database_credentials=_section(data.get("database_credentials"), DatabaseCredentials),
        username=data.get("username"),
        preset=parse_preset(data.get("preset")),
        advanced=_section(data.get("advanced"), AdvancedProps),
        scaling=_section(data.get("scaling"), ScalingProps),
        cache=cache,
        db_instance_type=data.get("db_instance_type"),
        cdn=bool(data.get("cdn", False)),
        certificate_arn=data.get("certificate_arn"),
        origin_domain_name=data.get("origin_domain_name"),
        scale_only_above_desired=bool(data.get("scale_only_above_desired", False)),
    )

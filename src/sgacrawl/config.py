"""Configuration model and helpers.

Data contract (dotted keys as written in .sgacrawl.yaml):
- filter.year: academic year to crawl, optional, 2000..2050
- filter.level: program tier (free text, resolved by the gate)
- filter.period: academic term (free text, resolved by the gate)
- request-delay.minimum_ms: floor between requests in milliseconds
- request-delay.rand_ms: random jitter added to every request delay
- concurrent.threads: crawler workers, 0 means automatic
- concurrent.classBufferMax: size of the class producer/consumer buffer
- login.user / login.password: SGA credentials
- plans: career-plan identifiers to crawl
- scrape.classes / scrape.careerPlans: what to crawl
- beautify.prefix / beautify.indent: JSON output formatting
- minify: write compact JSON
- log.toFile: also write sgacrawl.log

Missing keys take the zero value of their type, the same way the crawler
always read them. Every key can be overridden from the environment with
SGACRAWL_<KEY> (upper case, "." and "-" replaced by "_").
"""

from __future__ import annotations

import logging
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger("sgacrawl.config")

ENV_PREFIX = "SGACRAWL_"

KNOWN_KEYS = (
    "filter.year",
    "filter.level",
    "filter.period",
    "request-delay.minimum_ms",
    "request-delay.rand_ms",
    "concurrent.threads",
    "concurrent.classBufferMax",
    "login.user",
    "login.password",
    "plans",
    "scrape.classes",
    "scrape.careerPlans",
    "beautify.prefix",
    "beautify.indent",
    "minify",
    "log.toFile",
)

_KEYS_BY_LOWER = {key.lower(): key for key in KNOWN_KEYS}
_STRING_KEYS = frozenset(
    {"filter.level", "filter.period", "login.user", "login.password", "beautify.prefix", "beautify.indent"}
)
_PLAN_SEPARATORS = re.compile(r"[,\s]+")


class ErrorKind(str, Enum):
    """Why a configuration was rejected."""

    STRUCTURAL = "structural"
    TYPE = "type"
    RANGE = "range"
    ENUMERATION = "enumeration"
    CONFLICT = "conflict"


class ConfigValidationError(ValueError):
    """Raised when a configuration cannot reach the crawler."""

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
        self.kind = kind


class _Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class FilterSettings(_Section):
    """What part of the academic offer to crawl."""

    year: Optional[int] = None
    level: str = ""
    period: str = ""


class RequestDelay(_Section):
    """Politeness delay between requests."""

    minimum_ms: int = 0
    rand_ms: int = 0


class ConcurrencySettings(_Section):
    """Crawler worker pool and buffer sizes."""

    threads: int = 0
    class_buffer_max: int = Field(0, alias="classBufferMax")


class LoginSettings(_Section):
    """SGA credentials."""

    user: str = ""
    password: str = ""


class ScrapeSettings(_Section):
    """Crawl toggles."""

    classes: bool = False
    career_plans: bool = Field(False, alias="careerPlans")


class BeautifySettings(_Section):
    """JSON output formatting."""

    prefix: str = ""
    indent: str = ""


class LogSettings(_Section):
    to_file: bool = Field(False, alias="toFile")


class CrawlSettings(_Section):
    """Root configuration model for sgacrawl."""

    filter: FilterSettings = Field(default_factory=FilterSettings)
    request_delay: RequestDelay = Field(default_factory=RequestDelay, alias="request-delay")
    concurrent: ConcurrencySettings = Field(default_factory=ConcurrencySettings)
    login: LoginSettings = Field(default_factory=LoginSettings)
    plans: List[str] = Field(default_factory=list)
    scrape: ScrapeSettings = Field(default_factory=ScrapeSettings)
    beautify: BeautifySettings = Field(default_factory=BeautifySettings)
    minify: bool = False
    log: LogSettings = Field(default_factory=LogSettings)

    @field_validator("plans", mode="before")
    @classmethod
    def _split_plans(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item for item in _PLAN_SEPARATORS.split(value) if item]
        return value


def canonical_key(key: str) -> str:
    """Return the canonical spelling of a known key, or the key unchanged."""
    return _KEYS_BY_LOWER.get(key.lower(), key)


def flatten(mapping: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten a nested mapping into dotted keys. Lists are leaves."""
    out: Dict[str, Any] = {}
    for key, value in mapping.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            out.update(flatten(value, dotted))
        else:
            out[dotted] = value
    return out


def unflatten(store: Mapping[str, Any]) -> Dict[str, Any]:
    """Expand dotted keys back into a nested mapping."""
    out: Dict[str, Any] = {}
    for key, value in store.items():
        parts = key.split(".")
        node = out
        for part in parts[:-1]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                raise ConfigValidationError(
                    f"key {key} conflicts with a scalar value at {part}",
                    field=key,
                    value=value,
                    kind=ErrorKind.TYPE,
                )
            node = child
        node[parts[-1]] = value
    return out


def settings_from_store(store: Mapping[str, Any]) -> CrawlSettings:
    """Build the typed record from a dotted-key store.

    Unknown keys, null values and empty strings for non-text keys are
    ignored; loose values are coerced.
    """
    known = {}
    for key, value in store.items():
        canonical = canonical_key(key)
        if canonical not in KNOWN_KEYS or value is None:
            continue
        if value == "" and canonical not in _STRING_KEYS:
            continue
        known[canonical] = value
    try:
        return CrawlSettings.model_validate(unflatten(known))
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        value = error.get("input")
        raise ConfigValidationError(
            f"bad {field} in config: {error['msg']}. got {value!r}",
            field=field,
            value=value,
            kind=ErrorKind.TYPE,
        ) from exc


def settings_to_store(settings: CrawlSettings) -> Dict[str, Any]:
    """Return the dotted-key view of a settings record."""
    return flatten(settings.model_dump(by_alias=True))


def apply_to_store(store: MutableMapping[str, Any], settings: CrawlSettings) -> None:
    """Write a settings record back into a store in place.

    Every existing spelling of a key, whatever its case, receives the
    normalized value; keys not present yet are added canonically.
    """
    spellings: Dict[str, List[str]] = {}
    for key in store:
        spellings.setdefault(canonical_key(key), []).append(key)
    for key, value in settings_to_store(settings).items():
        for spelling in spellings.get(key, [key]):
            store[spelling] = value


def env_var_name(key: str) -> str:
    return ENV_PREFIX + key.upper().replace(".", "_").replace("-", "_")


def environment_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    """Collect SGACRAWL_* overrides for every known key."""
    overrides = {}
    for key in KNOWN_KEYS:
        name = env_var_name(key)
        if name in environ:
            overrides[key] = environ[name]
    return overrides


def load_store(path: Path | None, environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    """Read the config file (if any) and layer environment overrides on top."""
    store: Dict[str, Any] = {}
    if path is not None and path.exists():
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigValidationError(
                f"config file {path} must contain a mapping, got {type(data).__name__}",
                value=data,
                kind=ErrorKind.TYPE,
            )
        store = {canonical_key(key): value for key, value in flatten(data).items()}
    elif path is not None:
        logger.info("Config file %s not found, using environment only", path)

    overrides = environment_overrides(os.environ if environ is None else environ)
    if overrides:
        logger.debug("Environment overrides: %s", ", ".join(sorted(overrides)))
    store.update(overrides)
    return store


def default_config() -> CrawlSettings:
    """Return the example configuration written by `sgacrawl init`."""
    return CrawlSettings(
        filter=FilterSettings(year=2021, level="grado", period="sem1"),
        request_delay=RequestDelay(minimum_ms=1000, rand_ms=500),
        concurrent=ConcurrencySettings(threads=0, class_buffer_max=100),
        login=LoginSettings(user="", password=""),
        plans=[],
        scrape=ScrapeSettings(classes=True, career_plans=False),
        beautify=BeautifySettings(prefix="", indent=""),
        minify=True,
        log=LogSettings(to_file=False),
    )


def example_yaml() -> str:
    return yaml.safe_dump(
        default_config().model_dump(by_alias=True),
        sort_keys=False,
        allow_unicode=True,
    )


def save_config(settings: CrawlSettings, path: Path) -> None:
    """Save .sgacrawl.yaml to disk."""
    payload = settings.model_dump(by_alias=True)
    path.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), encoding="utf-8")

"""Configuration gate for sgacrawl.

Validates and canonicalizes settings before any crawl work starts. Hard
failures raise ConfigValidationError; borderline values are repaired and
reported as warnings in the returned GateResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, MutableMapping

from .config import (
    ConfigValidationError,
    CrawlSettings,
    ErrorKind,
    apply_to_store,
    settings_from_store,
)
from .filters import UnknownFilterValue, resolve_level, resolve_period
from .utils.normalize import is_blank, unescape_whitespace

logger = logging.getLogger("sgacrawl.gate")

YEAR_MIN = 2000
YEAR_MAX = 2050
MIN_DELAY_FLOOR_MS = 800
MIN_DELAY_DEFAULT_MS = 1000
# Minimum delay accepted verbatim, below the floor.
MIN_DELAY_ESCAPE_MS = 42
NO_PLANS_SENTINEL = "none"


@dataclass(frozen=True)
class GateResult:
    """Normalized settings plus the repairs made along the way."""

    settings: CrawlSettings
    warnings: List[str] = field(default_factory=list)


def check_config(settings: CrawlSettings) -> GateResult:
    """Validate and normalize a settings record.

    The argument is left untouched; the normalized copy is returned.
    """
    cfg = settings.model_copy(deep=True)
    warnings: list[str] = []

    def warn(message: str) -> None:
        logger.debug("repair: %s", message)
        warnings.append(message)

    year = cfg.filter.year
    if year is not None and not YEAR_MIN <= year <= YEAR_MAX:
        raise ConfigValidationError(
            f"bad year! should be integer between {YEAR_MIN} and {YEAR_MAX}, managed to read: {year}",
            field="filter.year",
            value=year,
            kind=ErrorKind.RANGE,
        )

    try:
        cfg.filter.level = resolve_level(cfg.filter.level)
        cfg.filter.period = resolve_period(cfg.filter.period).value
    except UnknownFilterValue as exc:
        raise ConfigValidationError(
            str(exc), field=exc.field, value=exc.value, kind=ErrorKind.ENUMERATION
        ) from exc

    delay = cfg.request_delay
    if delay.minimum_ms < MIN_DELAY_FLOOR_MS and delay.minimum_ms != MIN_DELAY_ESCAPE_MS:
        warn(
            f"request-delay.minimum_ms too low or not found in config (got {delay.minimum_ms})! "
            f"setting at {MIN_DELAY_DEFAULT_MS} ms."
        )
        delay.minimum_ms = MIN_DELAY_DEFAULT_MS
    if delay.rand_ms < 0:
        warn(f"request-delay.rand_ms is negative (got {delay.rand_ms}), setting to zero.")
        delay.rand_ms = 0

    concurrent = cfg.concurrent
    if concurrent.threads < 2 and concurrent.threads != 0:
        warn(
            f"number of threads is one or negative (got {concurrent.threads}), "
            "setting to zero for expected behaviour."
        )
        concurrent.threads = 0
    if concurrent.class_buffer_max < 1:
        raise ConfigValidationError(
            "concurrent.classBufferMax too low or not found. Must be at least 1, "
            f"got {concurrent.class_buffer_max}",
            field="concurrent.classBufferMax",
            value=concurrent.class_buffer_max,
            kind=ErrorKind.RANGE,
        )

    if cfg.login.password == "" and cfg.login.user != "":
        warn(f"login.password is empty, ignoring login.user {cfg.login.user!r}.")
        cfg.login.user = ""

    if not cfg.plans:
        if cfg.scrape.career_plans:
            warn("no plans found in config, disabling scrape.careerPlans.")
        cfg.plans = [NO_PLANS_SENTINEL]
        cfg.scrape.career_plans = False

    if not cfg.scrape.classes and not cfg.scrape.career_plans:
        raise ConfigValidationError(
            "both scrape.classes and scrape.careerPlans can't be false. no work to do",
            field="scrape",
            value={"classes": False, "careerPlans": False},
            kind=ErrorKind.CONFLICT,
        )

    prefix = unescape_whitespace(cfg.beautify.prefix)
    indent = unescape_whitespace(cfg.beautify.indent)
    if not is_blank(prefix) or not is_blank(indent):
        warn(
            "beautify.prefix/indent seem to have non whitespace characters. "
            f"this may invalidate json. got: {prefix!r}, {indent!r}"
        )
    else:
        cfg.minify = True
    cfg.beautify.prefix = prefix
    cfg.beautify.indent = indent

    return GateResult(settings=cfg, warnings=warnings)


def validate_store(store: MutableMapping[str, Any]) -> GateResult:
    """Run the gate over a dotted-key store and write the result back in place.

    Values that cannot be coerced to their key's type are rejected while the
    typed record is built, before any of the ordered checks run. Nothing is
    written when validation fails.
    """
    if not store:
        raise ConfigValidationError("no keys found in file", kind=ErrorKind.STRUCTURAL)
    result = check_config(settings_from_store(store))
    apply_to_store(store, result.settings)
    return result

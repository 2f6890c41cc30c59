# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Factory functions and process-wide logging state."""

import logging
import os
import threading
from collections.abc import Callable, Mapping
from typing import Any

from .appender import Appender
from .console_appender import ConsoleAppender
from .diagnostics import ConsoleDiagnosticReporter, DiagnosticReporter
from .exceptions import ConfigurationError
from .layouts import LayoutProvider, default_layouts
from .logger import Logger
from .models import AppenderConfig, CategoryConfig
from .registry import Category, CategoryRegistry
from .scheduler import DispatchScheduler
from .silent_appender import SilentAppender
from .slack_appender import SlackAppender

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "default"


def _default(value: str | None, env_var: str, fallback: str) -> str:
    """Helper to pick an explicit value, then env var, then fallback."""
    return (value or os.getenv(env_var) or fallback)


_state_lock = threading.RLock()
_reporter: DiagnosticReporter = ConsoleDiagnosticReporter()
_registry = CategoryRegistry(default_level=_default(None, "LOG_RELAY_LEVEL", "TRACE"))
_scheduler = DispatchScheduler(reporter=_reporter)
_logger_registry: dict[str, Logger] = {}


def _build_console(config: AppenderConfig, layouts: LayoutProvider, reporter: DiagnosticReporter) -> Appender:
    return ConsoleAppender.from_config(config.options, layouts=layouts)


def _build_silent(config: AppenderConfig, layouts: LayoutProvider, reporter: DiagnosticReporter) -> Appender:
    return SilentAppender.from_config(config.options)


def _build_slack(config: AppenderConfig, layouts: LayoutProvider, reporter: DiagnosticReporter) -> Appender:
    return SlackAppender.from_config(config.options, layouts=layouts, reporter=reporter)


_BUILDERS: dict[str, Callable[[AppenderConfig, LayoutProvider, DiagnosticReporter], Appender]] = {
    "console": _build_console,
    "silent": _build_silent,
    "slack": _build_slack,
}


def create_appender(
    config: AppenderConfig,
    layouts: LayoutProvider = default_layouts,
    reporter: DiagnosticReporter | None = None,
) -> Appender:
    """Create an appender from its configuration.

    Args:
        config: Appender configuration with a type discriminant
        layouts: Provider used to resolve layout options
        reporter: Diagnostic reporter for appenders that report delivery outcomes

    Returns:
        Appender instance

    Raises:
        ConfigurationError: If the type is unknown or the options are invalid

    Example:
        >>> appender = create_appender(AppenderConfig(name="out", appender_type="console"))
    """
    if config is None:
        raise ConfigurationError("appender config is required")

    appender_type = config.appender_type.lower()
    try:
        builder = _BUILDERS[appender_type]
    except KeyError as exc:
        supported = ", ".join(sorted(_BUILDERS))
        raise ConfigurationError(
            f"Unknown appender type: {config.appender_type}. Supported types: {supported}"
        ) from exc
    return builder(config, layouts, reporter or _reporter)


def get_logger(category: str = DEFAULT_CATEGORY) -> Logger:
    """Return the logger handle for a category, creating it on first use."""
    cached = _logger_registry.get(category)
    if cached is not None:
        return cached
    with _state_lock:
        cached = _logger_registry.get(category)
        if cached is None:
            cached = Logger(category, _registry, _scheduler, _reporter)
            _logger_registry[category] = cached
        return cached



def get_registry() -> CategoryRegistry:
    """Return the process-wide category registry."""
    return _registry


def add_appender(appender: Appender, *categories: str) -> None:
    """Attach an appender to categories.

    With no categories, the appender is added to the registry-wide defaults.
    """
    _scheduler.reinstate(appender)
    if not categories:
        _registry.add_default_appender(appender)
        return
    for category in categories:
        _registry.add_appender(category, appender)


def clear_appenders(timeout: float | None = 5.0) -> None:
    """Remove every category registration and retire the removed appenders.

    Events already queued for them are delivered (up to ``timeout``) before
    they are closed.
    """
    with _state_lock:
        _scheduler.retire(_registry.clear(), timeout=timeout)


def _section(config: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = config.get(key)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"'{key}' must be a mapping of names to settings")
    return section


def configure(
    config: Mapping[str, Any],
    layouts: LayoutProvider = default_layouts,
) -> dict[str, Appender]:
    """Replace the current configuration.

    Everything is validated and built before the registry changes. The new
    configuration is then swapped in as one snapshot, and appenders that are
    no longer referenced are drained and closed.

    Args:
        config: ``{"appenders": {name: {"type": ..., ...}},
            "categories": {name: {"appenders": [...], "level": ...}}}``.
            The "default" category sets the registry-wide defaults.
        layouts: Provider used to resolve layout options

    Returns:
        The created appenders by name

    Raises:
        ConfigurationError: If the configuration is invalid; the previous
            configuration stays in place
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError("logging configuration must be a mapping")

    appender_configs = [
        AppenderConfig.from_mapping(name, raw)
        for name, raw in _section(config, "appenders").items()
    ]
    category_configs = [
        CategoryConfig.from_mapping(name, raw)
        for name, raw in _section(config, "categories").items()
    ]

    known = {c.name for c in appender_configs}
    for category in category_configs:
        missing = [name for name in category.appenders if name not in known]
        if missing:
            raise ConfigurationError(
                f"Category '{category.name}' references unknown appender(s): {', '.join(missing)}"
            )

    appenders: dict[str, Appender] = {}
    try:
        for appender_config in appender_configs:
            appenders[appender_config.name] = create_appender(appender_config, layouts=layouts)
    except ConfigurationError:
        for appender in appenders.values():
            appender.close()
        raise

    entries = []
    default_appenders: tuple[Appender, ...] = ()
    default_level = None
    for category in category_configs:
        attached = tuple(appenders[name] for name in category.appenders)
        if category.name == DEFAULT_CATEGORY:
            default_appenders = attached
            default_level = category.level
        else:
            entries.append(Category(name=category.name, appenders=attached, level=category.level))

    with _state_lock:
        retired = _registry.replace(entries, default_appenders, default_level)
        _scheduler.retire(retired)

    logger.debug(
        f"Configured {len(appenders)} appender(s) and {len(category_configs)} category entries, "
        f"retired {len(retired)}"
    )
    return appenders


def flush(timeout: float | None = None) -> bool:
    """Wait for queued events to be delivered.

    Returns:
        True if every queue drained before the timeout
    """
    return _scheduler.flush(timeout)


def shutdown(timeout: float | None = 5.0) -> bool:
    """Deliver what is queued, then close and unregister every appender.

    A fresh scheduler is installed, so logger handles obtained before shutdown
    stay usable: they route nowhere until appenders are added or configure()
    is called again.

    Returns:
        True if every queue drained before the timeout
    """
    global _scheduler
    with _state_lock:
        registered = _registry.clear()
        old = _scheduler
        _scheduler = DispatchScheduler(reporter=_reporter)
        for handle in _logger_registry.values():
            handle._scheduler = _scheduler
    return old.shutdown(timeout, appenders=registered)


def set_diagnostic_reporter(reporter: DiagnosticReporter) -> None:
    """Replace the process-wide diagnostic reporter.

    Affects the scheduler, existing logger handles and appenders created
    afterwards through configure() or create_appender().
    """
    global _reporter
    with _state_lock:
        _reporter = reporter
        _scheduler.reporter = reporter
        for handle in _logger_registry.values():
            handle._reporter = reporter

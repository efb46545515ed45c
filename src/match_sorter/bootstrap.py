"""Wire logging, metrics and tracing from ``Settings`` in one call."""

from __future__ import annotations

import logging

from match_sorter.config import Settings
from match_sorter.observability.logging import configure_logging
from match_sorter.observability.metrics import init_metrics, set_metrics_enabled
from match_sorter.observability.tracing import init_tracing


logger = logging.getLogger(__name__)


def configure_observability(settings: Settings | None = None) -> Settings:
    """Apply ``settings`` to the observability stack and return them.

    Root logging is only reconfigured in ``service`` mode so that importing
    applications keep control of their own handlers.
    """
    settings = settings or Settings()

    if settings.operation_mode == "service":
        configure_logging(level=settings.log_level, json_output=settings.log_json)
    else:
        logging.getLogger("match_sorter").setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    set_metrics_enabled(settings.metrics_enabled)
    if settings.metrics_enabled:
        init_metrics(service_name=settings.service_name)
    if settings.tracing_enabled:
        init_tracing(service_name=settings.service_name)

    logger.debug(
        "Observability configured (mode=%s, metrics=%s, tracing=%s)",
        settings.operation_mode,
        settings.metrics_enabled,
        settings.tracing_enabled,
    )
    return settings

"""Thin wrappers around prometheus_client primitives.

Names are validated as snake_case and prefixed with the owning service so
instruments from several embedded counters do not collide in the default
registry.
"""

from __future__ import annotations

import re
from typing import Sequence

from prometheus_client import Counter, Histogram

_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


def _validate(name: str) -> str:
    if not _NAME_RE.match(name):
        raise ValueError(
            f"Invalid metric name '{name}'. Use snake_case alphanumerics/underscores."
        )
    return name


def _prefix(name: str, service: str | None) -> str:
    if service and not name.startswith(service + "_"):
        return f"{service}_{name}"
    return name


def get_counter(
    name: str,
    documentation: str,
    service: str | None = None,
    labelnames: Sequence[str] = (),
) -> Counter:
    return Counter(_validate(_prefix(name, service)), documentation, labelnames)


def get_histogram(
    name: str,
    documentation: str,
    service: str | None = None,
    buckets: Sequence[float] | None = None,
    labelnames: Sequence[str] = (),
) -> Histogram:
    full_name = _validate(_prefix(name, service))
    if buckets is None:
        return Histogram(full_name, documentation, labelnames)
    return Histogram(full_name, documentation, labelnames, buckets=buckets)


__all__ = ["get_counter", "get_histogram"]

"""sitewatch package entrypoint.

This module only exposes top-level submodules so callers can import from
`sitewatch` directly when building scripts or tests.
"""

__all__ = [
    "config",
    "models",
    "prober",
    "store",
    "sites",
    "poll",
    "scheduler",
    "notifier",
    "monitor",
    "self_ping",
    "runtime_status",
    "server",
    "app",
]

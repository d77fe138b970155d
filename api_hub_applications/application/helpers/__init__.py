"""Service helpers shared across use cases."""

from .application_enricher import ApplicationEnricher, redact
from .notifications import notify
from .scope_fixer import ScopeFixer
from .use_first_exception import gather_all, use_first_exception

__all__ = [
    "ApplicationEnricher",
    "ScopeFixer",
    "gather_all",
    "notify",
    "redact",
    "use_first_exception",
]

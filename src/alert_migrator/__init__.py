__version__ = "0.1.0"

from .app.main import (
    get_default_branch,
    list_repositories,
    migrate_analyses,
    migrate_code_scanning_alerts,
    migrate_secret_scanning_alerts,
)

__all__ = [
    "__version__",
    "get_default_branch",
    "list_repositories",
    "migrate_analyses",
    "migrate_code_scanning_alerts",
    "migrate_secret_scanning_alerts",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())

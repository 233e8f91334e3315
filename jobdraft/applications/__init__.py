"""
Application tracking.

Keeps drafted applications and the user's résumé in a small JSON file,
one key per value the way a browser keeps them in local storage.
"""

from .model import (  # noqa: F401
    APPLICATION_STATUSES,
    Application,
    ApplicationForm,
    create_application,
    validate_application_form,
)
from .store import ApplicationStore  # noqa: F401

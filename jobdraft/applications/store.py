"""
JSON file store for applications and the résumé.

The whole file is read and rewritten on every change; there is no
locking, so a store should be used by one process at a time.  A missing
or unreadable file behaves like empty storage.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, List

from ..errors import InvalidRequest
from .model import APPLICATION_STATUSES, Application

logger = logging.getLogger(__name__)

APPLICATIONS_KEY = "applications"
RESUME_KEY = "resume"


class ApplicationStore:
    """Key/value JSON storage holding ``applications`` and ``resume``."""

    def __init__(self, path: str) -> None:
        self.path = path

    def _read(self) -> Dict[str, object]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read %s, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.path)
            return {}
        return data

    def _write(self, data: Dict[str, object]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def list(self) -> List[Application]:
        raw = self._read().get(APPLICATIONS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed '%s' entry in %s", APPLICATIONS_KEY, self.path)
            return []
        return [Application.from_dict(item) for item in raw if isinstance(item, dict)]

    def get(self, application_id: str) -> Application:
        for app in self.list():
            if app.id == application_id:
                return app
        raise KeyError(application_id)

    def add(self, application: Application) -> Application:
        data = self._read()
        apps = [app.to_dict() for app in self.list()]
        apps.append(application.to_dict())
        data[APPLICATIONS_KEY] = apps
        self._write(data)
        logger.info("Saved application %s (%s at %s)", application.id, application.job_title, application.company_name)
        return application

    def update_status(self, application_id: str, status: str) -> Application:
        """Set the status of one application.

        Raises:
            InvalidRequest: If ``status`` is not a known status.
            KeyError: If no application has ``application_id``.
        """
        if status not in APPLICATION_STATUSES:
            raise InvalidRequest(
                f"Unknown status '{status}'; expected one of {', '.join(APPLICATION_STATUSES)}"
            )
        data = self._read()
        apps = self.list()
        updated = None
        for app in apps:
            if app.id == application_id:
                app.status = status
                updated = app
        if updated is None:
            raise KeyError(application_id)
        data[APPLICATIONS_KEY] = [app.to_dict() for app in apps]
        self._write(data)
        logger.info("Application %s is now %s", application_id, status)
        return updated

    def get_resume(self) -> str:
        value = self._read().get(RESUME_KEY, "")
        return value if isinstance(value, str) else ""

    def set_resume(self, text: str) -> None:
        data = self._read()
        data[RESUME_KEY] = text
        self._write(data)

"""
Update checks against the Furfolio release API.

One request per check with a short timeout; failures are logged,
escalated in the ``app_update`` audit log and reported as "no update".
There is no retry.
"""

import logging
import re
from dataclasses import dataclass, asdict
from datetime import datetime
from itertools import zip_longest
from typing import Optional

import requests
from django.conf import settings
from django.utils import timezone

from apps.audit.buffer import get_audit_log

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r'\d+')


def version_key(version: str) -> tuple:
    """Numeric parts of a dotted version, e.g. ``'2.10.1' -> (2, 10, 1)``."""
    return tuple(int(part) for part in _NUMBER.findall(version or ''))


def compare_versions(left: str, right: str) -> int:
    """Return 1, 0 or -1 as ``left`` is newer than, equal to or older than ``right``."""
    for a, b in zip_longest(version_key(left), version_key(right), fillvalue=0):
        if a != b:
            return 1 if a > b else -1
    return 0


@dataclass
class UpdateCheckResult:
    current_version: str
    latest_version: Optional[str] = None
    update_available: bool = False
    mandatory_update: bool = False
    checked_at: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class AppUpdateChecker:
    """
    Polls the version and changelog endpoints.

    Args:
        current_version: Running version, defaults to ``FURFOLIO_APP_VERSION``.
        session: Optional ``requests.Session`` (tests inject a mock).
    """

    def __init__(self, current_version: Optional[str] = None, session=None):
        self.current_version = current_version or settings.FURFOLIO_APP_VERSION
        self.session = session or requests.Session()
        self.timeout = settings.FURFOLIO_UPDATE_TIMEOUT
        self.audit = get_audit_log('app_update')

    def _event(self, event: str, escalate: bool = False, **info):
        self.audit.record(event, actor='AppUpdateChecker', escalate=escalate, **info)

    def check_for_updates(self) -> UpdateCheckResult:
        result = UpdateCheckResult(current_version=self.current_version, checked_at=timezone.now())
        self._event('update_check_started', version=self.current_version)
        try:
            response = self.session.get(settings.FURFOLIO_UPDATE_VERSION_URL, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            latest = payload['latest_version']
            if not isinstance(latest, str):
                raise ValueError("latest_version is not a string")
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning("Update check failed: %s", e)
            result.error = str(e)
            self._event('update_check_failed', escalate=True, error=str(e))
            return result

        result.latest_version = latest
        result.update_available = compare_versions(latest, self.current_version) > 0
        result.mandatory_update = bool(payload.get('mandatory_update', False))
        self._event(
            'update_check_completed',
            escalate=result.mandatory_update and result.update_available,
            available=result.update_available,
            latest=latest,
        )
        return result

    def fetch_changelog(self) -> Optional[str]:
        """Changelog text, or None when it cannot be fetched."""
        try:
            response = self.session.get(settings.FURFOLIO_UPDATE_CHANGELOG_URL, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Changelog fetch failed: %s", e)
            self._event('changelog_fetch_failed', escalate=True, error=str(e))
            return None
        self._event('changelog_fetched', length=len(response.text))
        return response.text

    def recent_events(self, count: int = 20):
        return self.audit.recent(count)

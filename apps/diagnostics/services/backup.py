"""
Full JSON backup and restore of business data.

Uses Django's JSON serializer. User accounts are not part of the backup;
restoring into a database where the referenced staff accounts are missing
fails with ``DataLoadFailedError``.
"""

import logging

from django.apps import apps
from django.core import serializers
from django.core.serializers.base import DeserializationError
from django.db import connection, transaction, DatabaseError, IntegrityError

from apps.audit.buffer import get_audit_log
from apps.core.exceptions import DataLoadFailedError

logger = logging.getLogger(__name__)

# Dependency order: referenced models come first
BACKUP_MODELS = (
    'tags.Tag',
    'owners.DogOwner',
    'owners.Dog',
    'appointments.Appointment',
    'appointments.GroomingSession',
    'billing.Charge',
    'loyalty.LoyaltyProgram',
    'loyalty.LoyaltyReward',
    'loyalty.RewardPool',
    'diagnostics.CrashReport',
)


def _backup_querysets():
    for label in BACKUP_MODELS:
        yield apps.get_model(label).objects.order_by('pk')


def export_backup(actor=None) -> str:
    """Serialize every business record to a JSON document."""
    objects = [obj for queryset in _backup_querysets() for obj in queryset]
    data = serializers.serialize('json', objects, indent=2)
    get_audit_log('admin_panel').record('backup_exported', actor=actor, objects=len(objects))
    return data


def restore_backup(data: str, actor=None) -> int:
    """
    Load a backup produced by ``export_backup``.

    Existing rows with the same primary key are overwritten. Everything is
    loaded in one transaction, and foreign keys are checked before it
    commits so a dangling reference fails the whole restore.

    Returns:
        Number of objects restored

    Raises:
        DataLoadFailedError: If the document is malformed or does not fit
            the current database
    """
    try:
        with transaction.atomic():
            count = 0
            for deserialized in serializers.deserialize('json', data):
                deserialized.save()
                count += 1
            connection.check_constraints()
    except (DeserializationError, IntegrityError, DatabaseError, ValueError) as e:
        logger.error("Backup restore failed: %s", e)
        get_audit_log('admin_panel').record('backup_restore_failed', actor=actor, escalate=True, error=str(e))
        raise DataLoadFailedError(str(e)) from e

    get_audit_log('admin_panel').record('backup_restored', actor=actor, escalate=True, objects=count)
    logger.info("Restored %s objects from backup", count)
    return count

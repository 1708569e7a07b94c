"""
CSV exports of owners, dogs, appointments and charges.

Each export is recorded in the ``export`` audit log with status
``success`` or ``error``. Fields containing commas, quotes or newlines are
quoted; everything else is written as is.
"""

import csv
import logging
from io import StringIO
from pathlib import Path
from typing import Iterable, Optional

from django.conf import settings
from django.utils import timezone

from apps.audit.buffer import get_audit_log
from .exceptions import ExportFailedError

logger = logging.getLogger(__name__)

OWNER_HEADERS = ['Owner Name', 'Email', 'Phone', 'Address', 'Number of Dogs', 'Last Appointment']
DOG_HEADERS = ['Dog Name', 'Breed', 'Owner', 'Date of Birth', 'Notes']
APPOINTMENT_HEADERS = ['Date', 'Time', 'Service', 'Dog', 'Owner', 'Status', 'Notes']
CHARGE_HEADERS = ['Date', 'Amount', 'Type', 'Owner', 'Dog', 'Notes']

DATE_FORMAT = '%m/%d/%Y'
TIME_FORMAT = '%I:%M %p'


def _short_date(value) -> str:
    if value is None:
        return ''
    if hasattr(value, 'hour'):
        value = timezone.localtime(value)
    return value.strftime(DATE_FORMAT)


def _write(headers, rows) -> str:
    output = StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(headers)
    writer.writerows(rows)
    return output.getvalue()


def owners_csv(owners: Iterable) -> str:
    return _write(OWNER_HEADERS, (
        [
            owner.owner_name,
            owner.email,
            owner.phone,
            owner.address,
            owner.dog_count,
            _short_date(owner.last_appointment_date),
        ]
        for owner in owners
    ))


def dogs_csv(dogs: Iterable) -> str:
    return _write(DOG_HEADERS, (
        [dog.name, dog.breed, dog.owner.owner_name, _short_date(dog.birthdate), dog.notes]
        for dog in dogs
    ))


def appointments_csv(appointments: Iterable) -> str:
    rows = []
    for appt in appointments:
        local = timezone.localtime(appt.date)
        rows.append([
            local.strftime(DATE_FORMAT),
            local.strftime(TIME_FORMAT).lstrip('0'),
            appt.get_service_type_display(),
            appt.dog.name,
            appt.owner.owner_name,
            appt.get_status_display(),
            appt.notes,
        ])
    return _write(APPOINTMENT_HEADERS, rows)


def charges_csv(charges: Iterable) -> str:
    return _write(CHARGE_HEADERS, (
        [
            _short_date(charge.date),
            f"{charge.amount:.2f}",
            charge.get_charge_type_display(),
            charge.owner.owner_name,
            charge.dog.name if charge.dog else '',
            charge.notes,
        ]
        for charge in charges
    ))


CSV_BUILDERS = {
    'owners': ('Owner', owners_csv),
    'dogs': ('Dog', dogs_csv),
    'appointments': ('Appointment', appointments_csv),
    'charges': ('Charge', charges_csv),
}


def safe_filename(filename: str) -> str:
    """Strip directories and make sure the name ends in ``.csv``."""
    name = Path(filename).name or 'export'
    if not name.lower().endswith('.csv'):
        name += '.csv'
    return name


def record_export(filename: str, entity_type: str, status: str, actor=None, path=None, error=None):
    return get_audit_log('export').record(
        'export',
        actor=actor,
        escalate=status != 'success',
        filename=filename,
        entity_type=entity_type,
        tags=[entity_type.lower()],
        file_path=str(path) if path else None,
        status=status,
        error=str(error) if error else None,
    )


def export_csv(entity: str, records: Iterable, filename: str, actor=None, write_file: bool = False):
    """
    Build the CSV for ``entity`` and optionally write it to the export dir.

    Args:
        entity: One of ``owners``, ``dogs``, ``appointments``, ``charges``
        records: Model instances to export
        filename: Target file name; ``.csv`` is appended when missing
        actor: Who requested the export
        write_file: Also write the file under ``FURFOLIO_EXPORT_DIR``

    Returns:
        tuple: ``(filename, csv_text, path_or_None)``

    Raises:
        ExportFailedError: If the CSV cannot be built or written
    """
    entity_type, builder = CSV_BUILDERS[entity]
    filename = safe_filename(filename)
    path: Optional[Path] = None
    try:
        text = builder(records)
        if write_file:
            export_dir = Path(settings.FURFOLIO_EXPORT_DIR)
            export_dir.mkdir(parents=True, exist_ok=True)
            path = export_dir / filename
            path.write_text(text, encoding='utf-8')
    except (OSError, AttributeError, ValueError) as e:
        logger.exception("CSV export of %s to %s failed", entity, filename)
        record_export(filename, entity_type, 'error', actor=actor, error=e)
        raise ExportFailedError(f"Failed to export {entity}: {e}") from e

    record_export(filename, entity_type, 'success', actor=actor, path=path)
    logger.info("Exported %s to %s", entity, filename)
    return filename, text, path

"""Save Transfer — whole-state import and export of save documents.

Invariants:
    - Import order: parse → detect → validate → convert → default-fill → one write transaction
    - Every failure before the transaction leaves the profile untouched
    - A failure inside the transaction rolls the clear and the rewrite back together
    - Export always yields a loadable canonical document, even for a fresh profile
    - Export carries every stored general/hero/artifact row, with or without machines

Design Decisions:
    - MalformedInputError is kept apart from ValidationFailedError so the user is told
      to check their JSON rather than shown a schema complaint
    - The full defect list is logged; only the first defect reaches the user
"""

import json
import logging

from wmstore.config import Settings, get_settings
from wmstore.core.convert_format import convert_to_final, fill_missing_defaults
from wmstore.core.detect_format import detect_save_format
from wmstore.core.domain_types import ProfileId, SaveFormat
from wmstore.core.errors import (
    ErrorContext, MalformedInputError, UnknownFormatError, ValidationFailedError,
)
from wmstore.core.validate_save import validate_save_data
from wmstore.infrastructure.database import DatabaseSessionManager
from wmstore.schemas.save_document import CanonicalSaveDocument, ImportReport
from wmstore.services.entity_repository import compose_state
from wmstore.services.entity_writes import (
    delete_profile_data, upsert_artifacts, upsert_heroes, upsert_machines,
    write_general,
)
from wmstore.services.profile_manager import resolve_profile

logger = logging.getLogger(__name__)


def parse_document(raw_json: str | bytes) -> object:
    """json.loads with MalformedInputError instead of JSONDecodeError."""
    if isinstance(raw_json, bytes):
        try:
            raw_json = raw_json.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedInputError(str(e))
    if not raw_json or not raw_json.strip():
        raise MalformedInputError(
            "empty document",
            ErrorContext(user_message="Please paste save data first."),
        )
    try:
        return json.loads(raw_json)
    except json.JSONDecodeError as e:
        raise MalformedInputError(str(e))


class SaveTransfer:
    """Importer/exporter over one storage handle."""

    def __init__(
        self, db_manager: DatabaseSessionManager, settings: Settings | None = None,
    ):
        self._db = db_manager
        self._settings = settings or get_settings()

    def prepare_document(self, data: object) -> tuple[SaveFormat, dict]:
        """Detect, validate, convert, and default-fill. Pure apart from logging."""
        fmt = detect_save_format(data)
        if fmt == SaveFormat.UNKNOWN:
            raise UnknownFormatError(ErrorContext(operation="import_data"))

        defects = validate_save_data(data, fmt)
        if defects:
            logger.warning(
                f"Invalid save data: {defects}",
                extra={
                    "operation": "import_data",
                    "save_format": fmt.value,
                    "defect_count": len(defects),
                },
            )
            raise ValidationFailedError(
                defects, ErrorContext(operation="import_data"),
            )

        stamp = (
            self._settings.app_version
            if self._settings.stamp_converted_app_version else None
        )
        if fmt != SaveFormat.FINAL:
            logger.info(
                f"Converting {fmt.value} format to final format",
                extra={"operation": "import_data", "save_format": fmt.value},
            )
        document = fill_missing_defaults(convert_to_final(data, fmt, stamp))
        return fmt, document

    async def import_data(
        self, raw_json: str | bytes, profile_id: ProfileId | None = None,
    ) -> ImportReport:
        """Replace a profile's general/machine/hero/artifact rows from a save document."""
        data = parse_document(raw_json)
        fmt, document = self.prepare_document(data)

        async with self._db.transaction() as db:
            profile = await resolve_profile(
                db, profile_id, self._settings.strict_invariants, "import_data",
            )
            pid = ProfileId(profile.id)
            await delete_profile_data(db, pid)
            await write_general(db, pid, document["general"])
            machines = await upsert_machines(db, pid, document["machines"])
            heroes = await upsert_heroes(db, pid, document["heroes"])
            await upsert_artifacts(db, pid, document["artifacts"])

        source_version = data.get("appVersion")
        if not isinstance(source_version, str):
            source_version = None
        was_converted = fmt != SaveFormat.FINAL
        report = ImportReport(
            profile_id=pid,
            source_format=fmt,
            was_converted=was_converted,
            source_app_version=source_version,
            needs_resave=was_converted or (
                source_version is not None
                and source_version != self._settings.app_version
            ),
            machines=machines,
            heroes=heroes,
        )
        logger.info(
            report.message,
            extra={
                "profile_id": pid, "operation": "import_data",
                "save_format": fmt.value,
            },
        )
        return report

    async def export_document(self, profile_id: ProfileId | None = None) -> dict:
        async with self._db.session() as db:
            profile = await resolve_profile(
                db, profile_id, self._settings.strict_invariants, "export_data",
            )
            state = await compose_state(db, ProfileId(profile.id))
        if state is None:
            document = CanonicalSaveDocument.empty(self._settings.app_version)
        else:
            document = CanonicalSaveDocument.from_state(
                state, self._settings.app_version,
            )
        return document.to_wire()

    async def export_data(self, profile_id: ProfileId | None = None) -> str:
        """Canonical JSON text of the profile's current state."""
        return json.dumps(await self.export_document(profile_id), indent=2)

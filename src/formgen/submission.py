from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from formgen.schema import TIMESTAMP_KEY, FormSchema
from formgen.store import ResponseStore
from formgen.utils import now_utc, to_iso
from formgen.validation import DEFAULT_MAX_LENGTH, validate_submission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    stored: bool
    record: Mapping[str, Any] | None = None
    errors: dict[str, str] = field(default_factory=dict)


def build_record(values: Mapping[str, str], created_at: datetime) -> dict[str, Any]:
    record: dict[str, Any] = dict(values)
    record[TIMESTAMP_KEY] = to_iso(created_at)
    return record


def handle_submission(
    schema: FormSchema,
    values: Mapping[str, str],
    store: ResponseStore,
    max_length: int = DEFAULT_MAX_LENGTH,
    now: datetime | None = None,
) -> SubmissionResult:
    """Validate ``values`` against ``schema`` and persist them as one record.

    The submission is all-or-nothing: when any field fails, nothing reaches
    the store and every field error is returned. :class:`StorageError` from
    the store propagates to the caller.
    """
    unknown = sorted(set(values) - set(schema.field_names()))
    if unknown:
        logger.debug("Ignoring keys not in the form: %s", ", ".join(unknown))

    normalized, errors = validate_submission(schema, values, max_length)
    if errors:
        logger.info("Rejected submission with %d invalid field(s)", len(errors))
        return SubmissionResult(stored=False, errors=errors)

    record = build_record(normalized, now or now_utc())
    store.append(record)
    logger.info("Stored response #%d in %s", len(store), store.path)
    return SubmissionResult(stored=True, record=record)

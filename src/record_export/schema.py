"""Derive the column schema of a record set."""

import logging
from typing import Iterable, List

from record_export.models import Record

logger = logging.getLogger(__name__)


def derive_schema(records: Iterable[Record]) -> List[str]:
    """Union of field names across records, in code-point order.

    A field counts as present when the key exists, even if its value is None.
    """
    names = set()
    for record in records:
        names.update(record.keys())
    schema = sorted(names)
    logger.debug("Derived schema: %s", ", ".join(schema))
    return schema

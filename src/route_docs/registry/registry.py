"""Ordered, append-only collection of route records."""

import logging
from collections.abc import Iterator

from .base import DocOptions, RouteRecord

logger = logging.getLogger(__name__)


class RouteRegistry:
    """Route records in registration order (which is document path order)."""

    def __init__(self):
        self._records: list[RouteRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RouteRecord]:
        return iter(tuple(self._records))

    @property
    def records(self) -> tuple[RouteRecord, ...]:
        return tuple(self._records)

    def add(self, record: RouteRecord) -> None:
        self._records.append(record)

    def merge_from(self, prefix: str, source: "RouteRegistry", defaults: DocOptions | None = None) -> None:
        """Append prefixed copies of every record in ``source``.

        ``defaults`` fill in tags, summary, description, security and
        deprecated only where a record left them unset; a record's own
        values always win. An empty tag list counts as unset.
        """
        records = source.records
        logger.debug("Merging %d routes under prefix %r", len(records), prefix)
        for record in records:
            update: dict = {"path": prefix + ("" if record.path == "/" else record.path)}
            if defaults is not None:
                update.update(_inherited(record, defaults))
            self._records.append(record.model_copy(update=update))


def _inherited(record: RouteRecord, defaults: DocOptions) -> dict:
    inherited: dict = {}
    if defaults.tags and not record.tags:
        inherited["tags"] = list(defaults.tags)
    if defaults.summary and not record.summary:
        inherited["summary"] = defaults.summary
    if defaults.description and not record.description:
        inherited["description"] = defaults.description
    if defaults.security is not None and record.security is None:
        inherited["security"] = defaults.security
    if defaults.deprecated is not None and record.deprecated is None:
        inherited["deprecated"] = defaults.deprecated
    return inherited

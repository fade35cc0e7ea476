"""
Header resolution — map the headers observed in one CSV pass onto canonical fields.

Sheet maintainers rename columns, add trailing spaces and leave the first column
unlabeled, so the index is rebuilt from scratch on every fetch.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderIndex:
    """Canonical field → observed header for the current dataset.

    ``identifier`` is whatever header sits in column 0 (possibly ""), and is
    None only when no headers were observed at all.
    """
    identifier: Optional[str]
    fields: dict[str, Optional[str]] = field(default_factory=dict)

    def header_for(self, name: str) -> Optional[str]:
        return self.fields.get(name)

    @property
    def missing(self) -> list[str]:
        return [name for name, header in self.fields.items() if header is None]


def resolve_headers(
    observed: Sequence[str],
    aliases: Mapping[str, Sequence[str]],
) -> HeaderIndex:
    """Pick, for every canonical field, the first alias present in ``observed``."""
    present = set(observed)
    identifier = observed[0] if len(observed) else None

    fields: dict[str, Optional[str]] = {}
    for name, candidates in aliases.items():
        fields[name] = next((c for c in candidates if c in present), None)

    index = HeaderIndex(identifier=identifier, fields=fields)
    if index.missing:
        logger.debug("No header found for fields: %s", ", ".join(index.missing))
    return index

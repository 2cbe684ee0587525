"""JSON rendering of block records.

Why JSON:
- Interoperability with scripts and pipelines (`--json`).
- Records are dumped as returned by the service, unknown keys included.
"""

from __future__ import annotations

import json
from typing import Iterable

from core.domain.models import UserBlock


def dump_user_blocks_json(blocks: Iterable[UserBlock]) -> str:
    """Serialize blocks to UTF-8 friendly, stable JSON (array, possibly empty)."""

    payload = [block.model_dump(mode="json", exclude_none=True) for block in blocks]
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)

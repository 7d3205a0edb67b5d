"""Persistent store of reconstructed grids.

Every successful reconstruction can be saved as a JSON document under
``local_db/collections/grids/``. Stored grids are later reused as fallback
templates for answer keys the search cannot solve inside its budgets.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.exceptions import InputError
from ..core.models import GridConstructorInput, GridConstructorResult
from ..utils.logger import get_logger
from .signatures import get_answer_key_length_signature
from .templates import trusted_templates_by_signature


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/collections/grids")


class GridStore:
    """Save reconstructed grids as structured JSON documents."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def save_success(self, result: GridConstructorResult, data: GridConstructorInput) -> str:
        """Persist a successful reconstruction and return its document ID."""

        if not result.success or result.grid_string is None:
            raise InputError("Only successful reconstructions can be stored")

        doc_id = self._new_id()
        doc = {
            "id": doc_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "width": data.width,
            "height": data.height,
            "signature": get_answer_key_length_signature(data),
            "gridString": result.grid_string,
            "exploredStates": result.explored_states,
            "fromTemplate": result.from_template,
        }

        path = self.store_dir / f"{doc_id}.json"
        path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        LOGGER.info("Grid saved: %s", doc_id)
        return doc_id

    def load_templates(self, width: Optional[int] = None, height: Optional[int] = None) -> List[str]:
        """Return trusted stored grid strings, optionally restricted to one size.

        A grid whose layout disagrees with its recorded answer signature, or
        which shares its signature with a different stored grid, is dropped.
        """

        records: List[Tuple[str, str]] = []
        for path in sorted(self.store_dir.glob("*.json")):
            try:
                doc = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                LOGGER.warning("Skipping unreadable grid document %s: %s", path.name, exc)
                continue
            if width is not None and doc.get("width") != width:
                continue
            if height is not None and doc.get("height") != height:
                continue
            grid_string = doc.get("gridString")
            signature = doc.get("signature")
            if grid_string and signature:
                records.append((grid_string, signature))

        templates = trusted_templates_by_signature(records)
        dropped = len({grid for grid, _ in records}) - len(templates)
        if dropped:
            LOGGER.info("Dropped %s untrusted stored grids", dropped)
        return templates

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _new_id() -> str:
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        short_uuid = uuid.uuid4().hex[:8]
        return f"{ts}_{short_uuid}"


__all__ = ["DEFAULT_STORE_DIR", "GridStore"]

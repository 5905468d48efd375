from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..models.document import Document
from ..services.targets import TargetMap, normalize_targets

"""JSON blob store: load at start, save on change.

The store is an opaque dump of what the engine holds (documents and targets);
it does no validation beyond what Document.from_dict tolerates.
"""

__all__ = [
    "StoreError",
    "StoreState",
    "JsonBlobStore",
]

logger = logging.getLogger(__name__)


class StoreError(Exception):
    pass


@dataclass(frozen=True)
class StoreState:
    documents: list[Document] = field(default_factory=list)
    targets: TargetMap = field(default_factory=dict)


class JsonBlobStore:
    """Single-file JSON store for documents and targets."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> StoreState:
        """Read the store; a missing file is an empty state.

        Raises:
            StoreError: if the file cannot be read or is not a JSON object
        """
        if not self.path.exists():
            logger.debug("store %s not found, starting empty", self.path)
            return StoreState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreError(f"invalid store file {self.path}: {e}") from e
        except OSError as e:
            raise StoreError(f"cannot read store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"store root must be an object: {self.path}")

        docs_raw: list[Any] = data.get("documents") or []
        documents = [Document.from_dict(d) for d in docs_raw if isinstance(d, dict)]
        targets = normalize_targets(data.get("targets"))
        logger.debug("store loaded documents=%d target_years=%d", len(documents), len(targets))
        return StoreState(documents=documents, targets=targets)

    def save(self, state: StoreState) -> Path:
        payload = {
            "documents": [d.to_dict() for d in state.documents],
            "targets": state.targets,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            raise StoreError(f"cannot write store file {self.path}: {e}") from e
        return self.path

# src/order_shipping_manifest/api/client.py
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from order_shipping_manifest.models import TagUpdate


@dataclass
class DryRunClient:
    """Tag-update client that never touches the network.

    Every update is recorded in memory and, when `path` is given, appended to
    a JSON array on disk:

        [
          {"id": "gid://shopify/Customer/1", "kind": "customer", "tags": ["a", "b"]},
          ...
        ]

    Safe to call from the reconciler's worker threads.
    """

    path: Optional[Path] = None
    logger: Optional[logging.Logger] = None
    updates: list[TagUpdate] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.path = Path(self.path) if self.path is not None else None
        self.logger = self.logger or logging.getLogger(
            "order_shipping_manifest.api.dry_run")
        self._lock = threading.Lock()

    def update_tags(self, update: TagUpdate) -> dict[str, Any]:
        entry = {"id": update.record_id, "kind": update.kind, "tags": update.tags.to_list()}
        with self._lock:
            self.updates.append(update)
            if self.path is not None:
                self._append(entry)
        self.logger.info("[dry-run] %s %s -> %s", update.kind, update.record_id, entry["tags"])
        return {"data": {"dryRun": entry}}

    def _append(self, entry: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        items: list[Any] = []
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
            if isinstance(data, list):
                items = data
        items.append(entry)
        self.path.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")

    def read_all(self) -> list[Any]:
        if self.path is None or not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return data if isinstance(data, list) else []

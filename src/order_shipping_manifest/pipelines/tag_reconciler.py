# src/order_shipping_manifest/pipelines/tag_reconciler.py
from __future__ import annotations

import logging
from concurrent.futures import ALL_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence, Tuple

from order_shipping_manifest.errors import InvalidInputError, TagBatchError
from order_shipping_manifest.io.schema import COMMISSION_PAID_TAG
from order_shipping_manifest.models import (
    Add,
    Remove,
    Replace,
    TagOperation,
    TagSet,
    TagUpdate,
    TagUpdateResult,
)
from order_shipping_manifest.models.tags import RECORD_KINDS

# Threads per batch when max_workers is unset; same as the HTTP connection pool size
DEFAULT_MAX_WORKERS = 10


class TagUpdateClient(Protocol):
    def update_tags(self, update: TagUpdate) -> dict[str, Any]:
        ...


def apply(current: Iterable[str], op: TagOperation) -> TagSet:
    """New tag collection for one record; `current` is never modified."""
    tags = TagSet.parse(current)
    if isinstance(op, Add):
        return tags.union((op.tag,))
    if isinstance(op, Remove):
        return tags.difference((op.tag,))
    if isinstance(op, Replace):
        return tags.difference(op.old_tags).union((op.new_tag,))
    raise TypeError(f"Unsupported tag operation: {op!r}")


def _blank(tag: Any) -> bool:
    return not isinstance(tag, str) or not tag.strip()


def validate_operation(op: TagOperation) -> None:
    if isinstance(op, (Add, Remove)):
        if _blank(op.tag):
            raise InvalidInputError("tag must not be empty")
    elif isinstance(op, Replace):
        if _blank(op.new_tag):
            raise InvalidInputError("replacement tag must not be empty")
        if " " in op.new_tag:
            raise InvalidInputError("replacement tag must not contain spaces")
        if not op.old_tags or all(_blank(t) for t in op.old_tags):
            raise InvalidInputError("select at least one tag to replace")
    else:
        raise InvalidInputError(f"Unsupported tag operation: {op!r}")


def _identity(record: Any) -> Tuple[str, Any]:
    if isinstance(record, Mapping):
        return str(record.get("id") or ""), record.get("tags")
    return str(getattr(record, "id", "") or ""), getattr(record, "tags", None)


def plan(pairs: Sequence[Tuple[Any, TagOperation]], *, kind: str = "customer") -> list[TagUpdate]:
    """
    Validate everything, then compute each record's new tag set locally.
    Nothing is dispatched here, so a rejected batch never reaches the backend.
    """
    if kind not in RECORD_KINDS:
        raise InvalidInputError(f"Unknown record kind: {kind!r}")
    if not pairs:
        raise InvalidInputError("no records selected")

    updates: list[TagUpdate] = []
    for record, op in pairs:
        validate_operation(op)
        record_id, tags = _identity(record)
        if not record_id:
            raise InvalidInputError(f"record without id: {record!r}")
        updates.append(TagUpdate(record_id=record_id, tags=apply(TagSet.parse(tags), op), kind=kind))
    return updates


def summary_message(op: TagOperation, count: int, *, kind: str = "customer") -> str:
    noun = "注文" if kind == "order" else "顧客"
    if isinstance(op, Add):
        if kind == "order":
            return f"{count}件の注文に「{op.tag}」を追加しました。"
        return f"{count}件の{noun}にタグ「{op.tag}」を追加しました。"
    if isinstance(op, Remove):
        return f"{count}件の{noun}からタグ「{op.tag}」を削除しました。"
    if isinstance(op, Replace):
        return f"{count}件の{noun}のタグを「{op.new_tag}」に更新しました。"
    return f"{count}件の{noun}を更新しました。"


class TagReconciler:
    """
    Drives one batch of independent tag updates.

    Contract:
      - validation happens before any call is made;
      - every update is submitted at once and the batch waits for all of them
        (at most DEFAULT_MAX_WORKERS run together unless max_workers says otherwise);
      - a failure does not cancel the other calls and successful updates are
        not rolled back;
      - if anything failed, TagBatchError is raised with the message of the
        first failed update (submission order) and every outcome attached.
    """

    def __init__(
        self,
        client: TagUpdateClient,
        logger: Optional[logging.Logger] = None,
        *,
        max_workers: Optional[int] = None,
    ) -> None:
        self.client = client
        self.logger = logger or logging.getLogger("order_shipping_manifest.tag_reconciler")
        self.max_workers = max_workers

    def run(self, records: Sequence[Any], op: TagOperation, *, kind: str = "customer") -> list[TagUpdateResult]:
        return self.run_pairs([(r, op) for r in records], kind=kind)

    def run_pairs(self, pairs: Sequence[Tuple[Any, TagOperation]], *, kind: str = "customer") -> list[TagUpdateResult]:
        return self.dispatch(plan(pairs, kind=kind))

    def mark_commission_paid(self, orders: Sequence[Any]) -> list[TagUpdateResult]:
        return self.run(orders, Add(COMMISSION_PAID_TAG), kind="order")

    def dispatch(self, updates: Sequence[TagUpdate]) -> list[TagUpdateResult]:
        if not updates:
            raise InvalidInputError("no records selected")

        workers = self.max_workers or min(len(updates), DEFAULT_MAX_WORKERS)
        self.logger.info("Dispatching %d tag update(s) (workers=%d)", len(updates), workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tag-update") as pool:
            futures: list[Future] = [pool.submit(self.client.update_tags, u) for u in updates]
            wait(futures, return_when=ALL_COMPLETED)

        results: list[TagUpdateResult] = []
        for update, fut in zip(updates, futures):
            exc = fut.exception()
            if exc is None:
                results.append(TagUpdateResult(update=update, ok=True, response=fut.result() or {}))
            else:
                self.logger.warning("Tag update failed for %s: %s", update.record_id, exc)
                results.append(TagUpdateResult(update=update, ok=False, error=str(exc)))

        failed = [r for r in results if not r.ok]
        if failed:
            self.logger.error("Tag batch failed: %d of %d update(s) failed", len(failed), len(results))
            raise TagBatchError(failed[0].error or "tag update failed", results=results)

        self.logger.info("Tag batch succeeded: %d update(s)", len(results))
        return results


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "TagUpdateClient",
    "apply",
    "validate_operation",
    "plan",
    "summary_message",
    "TagReconciler",
]

import logging
import threading

import pytest

from order_shipping_manifest.errors import InvalidInputError, TagBatchError, TagUpdateError
from order_shipping_manifest.io.schema import COMMISSION_PAID_TAG
from order_shipping_manifest.models import Add, NormalizedOrder, Remove, Replace, TagSet
from order_shipping_manifest.pipelines.tag_reconciler import (
    DEFAULT_MAX_WORKERS,
    TagReconciler,
    apply,
    plan,
    summary_message,
    validate_operation,
)


class RecordingClient:
    """Test double: records every call, fails for the ids it is told to."""

    def __init__(self, fail_ids=(), barrier=None):
        self.fail_ids = set(fail_ids)
        self.barrier = barrier
        self.calls = []
        self._lock = threading.Lock()

    def update_tags(self, update):
        with self._lock:
            self.calls.append(update)
        if self.barrier is not None:
            self.barrier.wait(timeout=5)
        if update.record_id in self.fail_ids:
            raise TagUpdateError(f"userErrors: tag rejected for {update.record_id}",
                                 record_id=update.record_id)
        return {"data": {"id": update.record_id}}


def _customers(n):
    return [{"id": f"gid://shopify/Customer/{i}", "tags": ["a"]} for i in range(1, n + 1)]


# ---- apply -------------------------------------------------------------------

def test_apply_add_is_idempotent():
    assert apply(TagSet(["a"]), Add("b")) == {"a", "b"}
    assert apply(TagSet(["a"]), Add("a")) == {"a"}


def test_apply_remove_absent_is_noop():
    assert apply(TagSet(["a"]), Remove("z")) == {"a"}
    assert apply(TagSet(["a", "b"]), Remove("a")) == {"b"}


def test_apply_replace():
    assert apply(TagSet(["a", "b"]), Replace({"a", "b"}, "c")) == {"c"}
    assert apply(TagSet(["a", "x"]), Replace({"a"}, "c")) == {"x", "c"}


def test_apply_does_not_mutate_input():
    current = TagSet(["a"])
    apply(current, Add("b"))
    assert current == {"a"}


def test_apply_accepts_plain_lists():
    assert apply(["a", "b"], Remove("b")).to_list() == ["a"]


# ---- validation --------------------------------------------------------------

@pytest.mark.parametrize(
    "op",
    [Add(""), Add("  "), Remove(""), Replace({"a"}, ""), Replace({"a"}, "two words"), Replace(set(), "c")],
)
def test_validate_operation_rejects(op):
    with pytest.raises(InvalidInputError):
        validate_operation(op)


def test_plan_rejects_empty_selection_before_any_call():
    client = RecordingClient()
    with pytest.raises(InvalidInputError):
        TagReconciler(client).run([], Add("x"))
    assert client.calls == []


def test_plan_rejects_invalid_operation_before_any_call():
    client = RecordingClient()
    with pytest.raises(InvalidInputError):
        TagReconciler(client).run(_customers(2), Add(""))
    assert client.calls == []


def test_plan_rejects_unknown_kind_and_missing_id():
    with pytest.raises(InvalidInputError):
        plan([({"id": "1"}, Add("x"))], kind="product")
    with pytest.raises(InvalidInputError):
        plan([({"tags": []}, Add("x"))])


def test_plan_reads_records_and_objects(order_node):
    order = NormalizedOrder.from_json(order_node())
    updates = plan([(order, Remove("b2b"))], kind="order")
    assert updates[0].record_id == order.id
    assert updates[0].tags == {"affiliate"}
    assert updates[0].kind == "order"


# ---- batch dispatch ----------------------------------------------------------

def test_batch_success_returns_every_result():
    client = RecordingClient()
    results = TagReconciler(client).run(_customers(3), Add("vip"))

    assert [r.ok for r in results] == [True, True, True]
    assert [r.record_id for r in results] == [f"gid://shopify/Customer/{i}" for i in (1, 2, 3)]
    assert all(u.tags == {"a", "vip"} for u in client.calls)


def test_second_call_fails_others_still_execute():
    # all three calls must be in flight together for the barrier to release
    client = RecordingClient(fail_ids={"gid://shopify/Customer/2"}, barrier=threading.Barrier(3))

    with pytest.raises(TagBatchError) as exc:
        TagReconciler(client).run(_customers(3), Add("vip"))

    assert len(client.calls) == 3
    assert str(exc.value) == "userErrors: tag rejected for gid://shopify/Customer/2"
    assert [r.ok for r in exc.value.results] == [True, False, True]
    assert [r.record_id for r in exc.value.failed] == ["gid://shopify/Customer/2"]


def test_first_failure_in_submission_order_is_reported():
    client = RecordingClient(fail_ids={"gid://shopify/Customer/3", "gid://shopify/Customer/2"})

    with pytest.raises(TagBatchError) as exc:
        TagReconciler(client, max_workers=1).run(_customers(3), Remove("a"))

    assert "Customer/2" in str(exc.value)
    assert len(exc.value.failed) == 2


class PeakClient(RecordingClient):
    """Tracks how many calls run at the same time."""

    def __init__(self):
        super().__init__()
        self.active = 0
        self.peak = 0

    def update_tags(self, update):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            threading.Event().wait(0.01)
            return super().update_tags(update)
        finally:
            with self._lock:
                self.active -= 1


def test_large_batch_is_capped_at_default_workers(caplog):
    client = PeakClient()

    with caplog.at_level(logging.INFO, logger="osm.test.reconciler"):
        results = TagReconciler(client, logging.getLogger("osm.test.reconciler")).run(_customers(15), Add("vip"))

    assert len(results) == 15
    assert len(client.calls) == 15
    assert client.peak <= DEFAULT_MAX_WORKERS
    assert f"workers={DEFAULT_MAX_WORKERS}" in caplog.text


def test_mark_commission_paid_targets_orders(order_node):
    client = RecordingClient()
    orders = [NormalizedOrder.from_json(order_node())]

    TagReconciler(client).mark_commission_paid(orders)

    (update,) = client.calls
    assert update.kind == "order"
    assert COMMISSION_PAID_TAG in update.tags


# ---- messages ----------------------------------------------------------------

def test_summary_messages():
    assert summary_message(Add("vip"), 2) == "2件の顧客にタグ「vip」を追加しました。"
    assert summary_message(Remove("vip"), 1) == "1件の顧客からタグ「vip」を削除しました。"
    assert summary_message(Replace({"a"}, "c"), 3) == "3件の顧客のタグを「c」に更新しました。"
    assert summary_message(Add(COMMISSION_PAID_TAG), 4, kind="order") == (
        f"4件の注文に「{COMMISSION_PAID_TAG}」を追加しました。"
    )

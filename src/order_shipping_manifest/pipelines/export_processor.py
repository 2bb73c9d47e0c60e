from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any, Optional, Sequence

from order_shipping_manifest.io.paths import read_records
from order_shipping_manifest.io.schema import (
    CUSTOMER_FILENAME,
    CUSTOMER_HEADERS,
    SETTLEMENT_FILENAME,
    SETTLEMENT_HEADERS,
)
from order_shipping_manifest.models import (
    NormalizedCustomer,
    NormalizedOrder,
    parse_customers,
    parse_orders,
)
from order_shipping_manifest.pipelines.column_contract import RowContext
from order_shipping_manifest.pipelines.customer_export import customer_rows
from order_shipping_manifest.pipelines.export_writer import ExportPayload, ExportWriter
from order_shipping_manifest.pipelines.profiles import profile_for, validate_shipment_type
from order_shipping_manifest.pipelines.settlement import (
    BASIS_UNIT_PRICE,
    aggregate,
    settlement_rows,
)

MANIFEST_KINDS = ("yamato", "seino")
EXPORT_KINDS = MANIFEST_KINDS + ("settlement", "customers")


class ExportProcessor:
    """Turns fetched records into the download payload for one export kind."""

    def __init__(
        self,
        logger,
        *,
        writer: Optional[ExportWriter] = None,
        today: dt.date | None = None,
    ) -> None:
        self.logger = logger
        self.writer = writer or ExportWriter(logger)
        self.today = today

    def manifest(self, orders: Sequence[NormalizedOrder], carrier: str, *, shipment_type: str = "0") -> ExportPayload:
        profile = profile_for(carrier)
        ctx = RowContext(
            shipment_type=validate_shipment_type(shipment_type),
            today=self.today or dt.date.today(),
        )
        rows = profile.serialize_all(orders, ctx)
        self.logger.info("%s manifest: %d order(s) x %d column(s)",
                         profile.name, len(rows), profile.column_count)
        return self.writer.write(rows, profile.filename, container=profile.container, header=profile.header)

    def settlement(self, orders: Sequence[NormalizedOrder], percentage: Any, *, basis: str = BASIS_UNIT_PRICE) -> ExportPayload:
        result = aggregate(orders, percentage, basis=basis)
        self.logger.info(
            "settlement: %d order(s), total=%s, commission(%s%%)=%s",
            len(orders), result.grand_total_display, result.percentage_text, result.commission_display,
        )
        return self.writer.write_delimited(
            settlement_rows(orders, result), SETTLEMENT_FILENAME, header=SETTLEMENT_HEADERS)

    def customers(self, customers: Sequence[NormalizedCustomer]) -> ExportPayload:
        rows = customer_rows(customers)
        self.logger.info("customer export: %d customer(s)", len(rows))
        return self.writer.write_delimited(rows, CUSTOMER_FILENAME, header=CUSTOMER_HEADERS)

    def build(self, kind: str, records: Any, **options: Any) -> ExportPayload:
        """Dispatch on export kind; `records` is the raw JSON payload."""
        if kind in MANIFEST_KINDS:
            return self.manifest(parse_orders(records), kind, shipment_type=options.get("shipment_type", "0"))
        if kind == "settlement":
            return self.settlement(
                parse_orders(records),
                options.get("percentage", "10"),
                basis=options.get("basis", BASIS_UNIT_PRICE),
            )
        if kind == "customers":
            return self.customers(parse_customers(records))
        raise ValueError(f"Unknown export kind: {kind!r} (expected one of {EXPORT_KINDS})")

    def process(self, input_path: Path, out_dir: Path, kind: str, **options: Any) -> dict[str, Any]:
        input_path = Path(input_path)
        if not input_path.exists():
            self.logger.error("Input file does not exist: %s", input_path)
            raise FileNotFoundError(input_path)

        payload = self.build(kind, read_records(input_path), **options)
        written = payload.save(out_dir)
        self.logger.info("Wrote %s → %s", kind, written)
        return {
            "kind": kind,
            "output_path": str(written),
            "filename": payload.filename,
            "media_type": payload.media_type,
            "bytes": len(payload.content),
            "timestamp_utc": dt.datetime.now(dt.timezone.utc).isoformat(),
        }

# src/order_shipping_manifest/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config.env import EnvError, get_app_env
from .config.logging_config import PACKAGE_LOGGER, get_logger, quiet_http_loggers
from .errors import InvalidInputError, TagBatchError
from .io.paths import derive_output_paths, read_records
from .io.schema import COMMISSION_PAID_TAG, CUSTOMER_FILENAME, SETTLEMENT_FILENAME
from .models import Add, Remove, Replace, parse_customers, parse_orders
from .pipelines.export_processor import ExportProcessor
from .pipelines.export_writer import ExportWriter
from .pipelines.profiles import PROFILES
from .pipelines.settlement import BASES, BASIS_UNIT_PRICE
from .pipelines.tag_reconciler import TagReconciler, summary_message
from .rules.lookups import INVOICE_TYPES

_EXPORT_FILENAMES = {
    "yamato": PROFILES["yamato"].filename,
    "seino": PROFILES["seino"].filename,
    "settlement": SETTLEMENT_FILENAME,
    "customers": CUSTOMER_FILENAME,
}


def _common(p: argparse.ArgumentParser) -> None:
    p.add_argument("input", type=Path, help="JSON file with the fetched records.")
    p.add_argument("--no-console", action="store_true",
                   help="Disable console logging (file logging remains).")
    p.add_argument("--log-level", default="INFO",
                   help="Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="order-shipping-manifest",
        description="Build carrier manifests, settlement reports and customer exports, "
                    "or apply tag changes, from already-fetched store records.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("yamato", "Yamato manifest (CSV, 95 columns)."),
        ("seino", "Seino manifest (XLSX, 34 columns)."),
        ("settlement", "B2B affiliate settlement report (CSV)."),
        ("customers", "Customer export (CSV)."),
    ):
        sp = sub.add_parser(name, help=help_text)
        _common(sp)
        sp.add_argument("--out-dir", type=Path, default=None,
                        help="Directory for the export (default: next to the input).")
        sp.add_argument("--quote", action="store_true",
                        help="Quote CSV cells containing ',' or newlines (default: legacy unquoted output).")
        if name == "yamato":
            sp.add_argument("--shipment-type", default="0", choices=sorted(INVOICE_TYPES),
                            help="Yamato invoice type code. Default: 0")
        if name == "settlement":
            sp.add_argument("--percentage", default="10",
                            help="Commission percentage. Default: 10")
            sp.add_argument("--basis", default=BASIS_UNIT_PRICE, choices=BASES,
                            help="Subtotal basis (unit_price ignores quantity). Default: unit_price")

    tp = sub.add_parser("tags", help="Add/remove/replace tags on the given records.")
    _common(tp)
    tp.add_argument("--op", required=True, choices=("add", "remove", "replace", "commission-paid"))
    tp.add_argument("--tag", default="", help="Tag to add/remove, or the replacement tag.")
    tp.add_argument("--old-tags", default="", help="Comma-separated tags replaced by --tag.")
    tp.add_argument("--kind", default="customer", choices=("customer", "order"))
    tp.add_argument("--dry-run", action="store_true",
                    help="Do not call the backend; record the updates instead.")
    tp.add_argument("--dry-run-log", type=Path, default=None,
                    help="JSON file the dry-run updates are appended to.")
    tp.add_argument("--strict-env", action="store_true",
                    help="Require Shopify credentials even for --dry-run; otherwise exit 2.")
    return p


def _operation(args):
    if args.op == "add":
        return Add(args.tag), args.kind
    if args.op == "remove":
        return Remove(args.tag), args.kind
    if args.op == "replace":
        old = [t.strip() for t in args.old_tags.split(",") if t.strip()]
        return Replace(frozenset(old), args.tag), args.kind
    return Add(COMMISSION_PAID_TAG), "order"


def _run_tags(args, logger) -> int:
    try:
        env_cfg = get_app_env(strict=args.strict_env or not args.dry_run)
    except EnvError as e:
        logger.error("Environment error: %s", e)
        return 2

    if args.dry_run:
        from .api.client import DryRunClient
        client = DryRunClient(args.dry_run_log, logger=logger)
        logger.info("Dry run: no backend calls will be made")
    else:
        from .api.shopify import ShopifyAdminClient, ShopifyConfig
        client = ShopifyAdminClient(ShopifyConfig.from_env(env_cfg), logger=logger)
        logger.info("Live Shopify Admin API enabled (shop=%s)", env_cfg.SHOPIFY_SHOP_DOMAIN)

    op, kind = _operation(args)
    raw = read_records(args.input)
    records = parse_orders(raw) if kind == "order" else parse_customers(raw)

    try:
        results = TagReconciler(client, logger).run(records, op, kind=kind)
    except InvalidInputError as e:
        logger.error("Rejected before dispatch: %s", e)
        return 2
    except TagBatchError as e:
        logger.error("Tag update failed: %s (%d of %d failed)", e, len(e.failed), len(e.results))
        return 1

    logger.info(summary_message(op, len(results), kind=kind))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    filename = _EXPORT_FILENAMES.get(args.command, "tag_updates.json")
    try:
        export_path, log_path = derive_output_paths(args.input, filename, getattr(args, "out_dir", None))
    except FileNotFoundError:
        print(f"error: input file not found: {args.input}", file=sys.stderr)
        return 2

    logger = get_logger(
        PACKAGE_LOGGER,
        level=args.log_level,
        console=not args.no_console,
        log_file=log_path,
    )
    if logger.level > logging.DEBUG:
        quiet_http_loggers()
    logger.debug("Logger initialized.")
    logger.info("Input: %s", args.input)
    logger.info("Log file: %s", log_path)

    if args.command == "tags":
        try:
            return _run_tags(args, logger)
        except Exception as e:
            logger.exception("Failed to apply tag changes: %s", e)
            return 1

    logger.info("Export output: %s", export_path)
    options = {}
    if args.command == "yamato":
        options["shipment_type"] = args.shipment_type
    if args.command == "settlement":
        options["percentage"] = args.percentage
        options["basis"] = args.basis

    try:
        processor = ExportProcessor(logger, writer=ExportWriter(logger, quote=args.quote))
        processor.process(args.input, export_path.parent, args.command, **options)
    except InvalidInputError as e:
        logger.error("Invalid input: %s", e)
        return 2
    except Exception as e:
        logger.exception("Failed to build %s export: %s", args.command, e)
        return 1

    logger.info("Done.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

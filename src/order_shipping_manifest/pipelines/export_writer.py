# src/order_shipping_manifest/pipelines/export_writer.py
from __future__ import annotations

import csv
import io
import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

import pandas as pd

from order_shipping_manifest.io.schema import (
    CSV_MEDIA_TYPE,
    UTF8_BOM_BYTES,
    UTF8_BOM_TEXT,
    XLSX_MEDIA_TYPE,
)

Row = Sequence[object]


@dataclass(frozen=True)
class ExportPayload:
    """A finished download: what the caller hands to the user as a file."""
    filename: str
    media_type: str
    content: bytes

    def text(self) -> str:
        """Decoded text (BOM kept) for delimited payloads."""
        return self.content.decode("utf-8")

    def save(self, directory: Path | str) -> Path:
        out = Path(directory) / self.filename
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(self.content)
        return out


def _cell(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _quoted_line(cells: list[str]) -> str:
    """One row at its own width; only cells holding ',', '"' or a newline are quoted."""
    # csv writes a lone empty field as '""'; keep blank rows blank
    if not any(cells):
        return ",".join(cells)
    buf = io.StringIO()
    pd.DataFrame([cells], dtype="object").to_csv(
        buf, header=False, index=False, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    return buf.getvalue()[:-1]


class ExportWriter:
    """
    Renders rows into one of the two container formats used by the portals.

    Delimited text is written the legacy way by default: cells joined by ","
    and rows by "\\n" with no quoting, so a value holding a comma or a newline
    shifts the columns in the receiving tool. `quote=True` switches to
    RFC 4180 minimal quoting.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, *, quote: bool = False) -> None:
        self.logger = logger or logging.getLogger("order_shipping_manifest.export_writer")
        self.quote = quote

    def write_delimited(
        self,
        rows: Iterable[Row],
        filename: str,
        *,
        header: Optional[Row] = None,
    ) -> ExportPayload:
        all_rows = ([header] if header is not None else []) + list(rows)

        if self.quote:
            body = self._quoted(all_rows)
        else:
            body = "\n".join(",".join(_cell(c) for c in r) for r in all_rows)
            if self.logger.isEnabledFor(logging.WARNING):
                unsafe = sum(1 for r in all_rows for c in r if any(ch in _cell(c) for ch in ",\n"))
                if unsafe:
                    self.logger.warning(
                        "%s: %d cell(s) contain ',' or newline and are written unescaped", filename, unsafe)

        content = (UTF8_BOM_TEXT + body).encode("utf-8")
        self.logger.debug("Rendered %s (rows=%d, bytes=%d)", filename, len(all_rows), len(content))
        return ExportPayload(filename=filename, media_type=CSV_MEDIA_TYPE, content=content)

    def _quoted(self, rows: list[Row]) -> str:
        return "\n".join(_quoted_line([_cell(c) for c in r]) for r in rows)

    def write_spreadsheet(
        self,
        rows: Iterable[Row],
        filename: str,
        *,
        header: Optional[Row] = None,
        sheet_name: str = "Orders",
    ) -> ExportPayload:
        data = [[_cell(c) for c in r] for r in rows]
        columns = list(header) if header is not None else None
        frame = pd.DataFrame(data, columns=columns, dtype="object")

        buf = io.BytesIO()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            with pd.ExcelWriter(buf, engine="openpyxl", mode="w") as xw:
                frame.to_excel(xw, sheet_name=sheet_name, index=False,
                               header=header is not None, na_rep="")

        # The portal expects the UTF-8 marker even in front of the zip container
        content = UTF8_BOM_BYTES + buf.getvalue()
        self.logger.debug("Rendered %s (rows=%d, bytes=%d)", filename, len(data), len(content))
        return ExportPayload(filename=filename, media_type=XLSX_MEDIA_TYPE, content=content)

    def write(
        self,
        rows: Iterable[Row],
        filename: str,
        *,
        container: str = "csv",
        header: Optional[Row] = None,
    ) -> ExportPayload:
        if container == "csv":
            return self.write_delimited(rows, filename, header=header)
        if container == "xlsx":
            return self.write_spreadsheet(rows, filename, header=header)
        raise ValueError(f"Unknown container kind: {container!r}")


def read_spreadsheet_payload(payload: ExportPayload, *, header: bool = False) -> pd.DataFrame:
    """Strip the marker and load the workbook back (review/testing helper)."""
    raw = payload.content
    if raw.startswith(UTF8_BOM_BYTES):
        raw = raw[len(UTF8_BOM_BYTES):]
    return pd.read_excel(
        io.BytesIO(raw),
        sheet_name=0,
        engine="openpyxl",
        header=0 if header else None,
        dtype=str,
        keep_default_na=False,
    )

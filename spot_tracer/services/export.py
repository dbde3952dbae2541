"""CSV export of processed transactions."""

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from spot_tracer.models import ProcessedTransaction

BOM = "\ufeff"
CSV_HEADER = ("Date", "Type", "Price", "Quantity", "AvgPriceAfter", "TransactionPL")


def plain_number(value: Optional[Decimal]) -> str:
    """Render a decimal without exponent or trailing zeros (``1.50`` -> ``1.5``)."""

    if value is None:
        return "0"
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    text = format(value, "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def render_transactions_csv(processed: Iterable[ProcessedTransaction]) -> str:
    """Return the CSV document for ``processed`` in chronological order, BOM included."""

    buffer = io.StringIO()
    buffer.write(BOM)
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for item in processed:
        writer.writerow(
            (
                item.date.isoformat(),
                item.kind.value,
                plain_number(item.price),
                plain_number(item.quantity),
                plain_number(item.post_trade_average_price),
                plain_number(item.transaction_pl),
            )
        )
    return buffer.getvalue()


def export_filename(alias: str, on_date: date) -> str:
    return f"SpotTracer_{alias}_{on_date.isoformat()}.csv"


__all__ = ["BOM", "CSV_HEADER", "export_filename", "plain_number", "render_transactions_csv"]

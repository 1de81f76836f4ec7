import csv
import io

from core.ledger import Ledger


EXPORT_FILENAME = "shoply-stock.csv"
EXPORT_HEADER = ["Item", "Category", "Price", "Quantity", "Sold", "Remaining", "Total Value"]


def _plain_number(x) -> str:
    # 25000.0 -> "25000", 12.5 -> "12.5"
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    return str(x)


def export_csv(ledger: Ledger) -> str:
    """
    Header plus one row per item, newline separated, no trailing newline.

    Plain comma join for ordinary text; only fields holding a comma, a double
    quote or a line break get CSV quoting.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for item in ledger:
        writer.writerow([
            item.name,
            item.category,
            _plain_number(item.price),
            item.quantity,
            item.sold,
            item.remaining,
            _plain_number(item.value),
        ])
    return buf.getvalue().removesuffix("\n")

"""
View projection.

Pure functions from a Ledger snapshot to the view-models the dashboard
renders. Nothing here mutates the ledger; every call builds a fresh
view-model so stale projections are replaced, never patched.
"""

from core.ledger import Ledger
from schemas.views import (
    ChartDataset,
    ChartSeries,
    ChartView,
    Dashboard,
    SaleOption,
    SaleTargetView,
    StatsView,
    TableRow,
    TableView,
)


CURRENCY_SYMBOL = "₦"
EMPTY_TABLE_TEXT = "No stock added yet"
SELECT_ITEM_LABEL = "Select item"
PLACEHOLDER_COUNT = 20
PLACEHOLDER_PREFIX = "placeholder-"

PROPORTION_COLORS = ["#2bb673", "#ffce56"]
SOLD_COLOR = "#2b7aa3"
REMAINING_COLOR = "#0f4d7a"


def format_currency(num: float) -> str:
    # en-US grouping, up to 3 fraction digits, trailing zeros dropped
    text = f"{float(num):,.3f}".rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return f"{CURRENCY_SYMBOL}{text}"


def is_placeholder(value: str) -> bool:
    return str(value).startswith(PLACEHOLDER_PREFIX)


def stats_view(ledger: Ledger) -> StatsView:
    totals = ledger.aggregate()
    return StatsView(
        total_stock=totals.total_stock,
        stock_sold=totals.stock_sold,
        stock_remaining=totals.stock_remaining,
        total_value=totals.total_value,
        total_value_display=format_currency(totals.total_value),
    )


def table_view(ledger: Ledger) -> TableView:
    if len(ledger) == 0:
        return TableView(rows=[], empty=True, placeholder=EMPTY_TABLE_TEXT)
    rows = [
        TableRow(
            name=item.name,
            category=item.category,
            price_display=format_currency(item.price),
            quantity=item.quantity,
            sold=item.sold,
            remaining=item.remaining,
            value_display=format_currency(item.value),
        )
        for item in ledger
    ]
    return TableView(rows=rows, empty=False)


def sale_target_view(ledger: Ledger) -> SaleTargetView:
    options = [SaleOption(value="", label=SELECT_ITEM_LABEL, selectable=False)]
    if len(ledger) == 0:
        options.extend(
            SaleOption(value=f"{PLACEHOLDER_PREFIX}{i}", label=f"Item {i}", selectable=False)
            for i in range(1, PLACEHOLDER_COUNT + 1)
        )
    else:
        options.extend(
            SaleOption(value=str(index), label=item.name, selectable=True)
            for index, item in enumerate(ledger)
        )
    return SaleTargetView(options=options)


def chart_view(ledger: Ledger) -> ChartView:
    totals = ledger.aggregate()
    proportion = ChartSeries(
        labels=["Sold", "Remaining"],
        datasets=[
            ChartDataset(
                label="Stock",
                data=[totals.stock_sold, totals.stock_remaining],
                background_color=PROPORTION_COLORS,
            )
        ],
    )

    items = list(ledger)
    comparison = ChartSeries(
        labels=[item.name for item in items],
        datasets=[
            ChartDataset(label="Sold", data=[item.sold for item in items], background_color=[SOLD_COLOR]),
            ChartDataset(label="Remaining", data=[item.remaining for item in items], background_color=[REMAINING_COLOR]),
        ],
    )
    return ChartView(proportion=proportion, comparison=comparison)


def refresh_all(ledger: Ledger) -> Dashboard:
    """Single re-projection entry point; every mutation ends here."""
    return Dashboard(
        stats=stats_view(ledger),
        table=table_view(ledger),
        sale_targets=sale_target_view(ledger),
        charts=chart_view(ledger),
    )

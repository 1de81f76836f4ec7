from typing import List, Optional

from pydantic import BaseModel


class StatsView(BaseModel):
    total_stock: int
    stock_sold: int
    stock_remaining: int
    total_value: float
    total_value_display: str


class TableRow(BaseModel):
    name: str
    category: str
    price_display: str
    quantity: int
    sold: int
    remaining: int
    value_display: str


class TableView(BaseModel):
    rows: List[TableRow]
    empty: bool
    placeholder: Optional[str] = None


class SaleOption(BaseModel):
    value: str
    label: str
    selectable: bool


class SaleTargetView(BaseModel):
    options: List[SaleOption]


class ChartDataset(BaseModel):
    label: str
    data: List[int]
    background_color: List[str]


class ChartSeries(BaseModel):
    labels: List[str]
    datasets: List[ChartDataset]


class ChartView(BaseModel):
    # "Sold" vs "Remaining" across the whole ledger
    proportion: ChartSeries
    # per-item sold/remaining pairs
    comparison: ChartSeries


class Dashboard(BaseModel):
    stats: StatsView
    table: TableView
    sale_targets: SaleTargetView
    charts: ChartView

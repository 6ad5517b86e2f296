from .filter_builder import FilterBuilder
from .paginator import Paginator
from .summary_aggregator import SummaryAggregator
from .query_engine import QueryEngine
from .record_service import RecordService
from .plot_pricing_service import PlotPricingService

__all__ = [
    "FilterBuilder",
    "Paginator",
    "SummaryAggregator",
    "QueryEngine",
    "RecordService",
    "PlotPricingService",
]

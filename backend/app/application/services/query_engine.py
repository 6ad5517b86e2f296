"""Query engine — filtered, paginated, sorted listing with a filtered-set summary.

Flow per call:
  1. FilterBuilder validates parameters and builds the predicate and sort
     (malformed input fails here, before any store query).
  2. The page (records + total) and the summary are fetched concurrently;
     a failure in either abandons the other.
  3. The module's finalize/derive hooks shape the summary and the records.
"""

import logging

from app.application.interfaces import RecordStore
from app.application.services.concurrency import gather_all
from app.application.services.filter_builder import FilterBuilder
from app.application.services.paginator import Paginator
from app.application.services.summary_aggregator import SummaryAggregator
from app.domain.entities import ModuleConfig, PageResult, QueryParams, Record

logger = logging.getLogger(__name__)


class QueryEngine:
    """Stateless per call; the store is passed in so one engine serves every module."""

    def __init__(
        self,
        filter_builder: FilterBuilder,
        paginator: Paginator | None = None,
        aggregator: SummaryAggregator | None = None,
    ):
        self._filters = filter_builder
        self._paginator = paginator or Paginator()
        self._aggregator = aggregator or SummaryAggregator()

    async def run(
        self,
        params: QueryParams,
        config: ModuleConfig,
        store: RecordStore,
    ) -> PageResult[Record]:
        predicate = self._filters.build(params, config)
        sort = self._filters.resolve_sort(params, config)
        page, limit = self._paginator.clamp(params.page, params.limit, config.default_limit)

        (records, total), raw_summary = await gather_all(
            self._paginator.paginate(predicate, sort, page, limit, store, config.default_limit),
            self._aggregator.summarize(predicate, config.summary_specs(), store),
        )

        summary = config.finalize(raw_summary) if config.finalize else raw_summary
        if config.derive is not None:
            for record in records:
                record.derived = config.derive(record)

        logger.debug(
            "Listed %s: page=%d limit=%d returned=%d total=%d",
            config.name, page, limit, len(records), total,
        )
        return PageResult(
            records=records,
            pagination=self._paginator.page_meta(page, limit, total),
            summary=summary,
        )

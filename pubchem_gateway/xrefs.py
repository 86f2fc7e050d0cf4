"""
Cross-reference aggregation.

PubChem's combined xrefs endpoint times out for well-studied compounds, so
each requested category is fetched with its own call. The calls run
concurrently through the shared gateway (and therefore its rate limiter), a
failing category degrades to "no values", and the surviving values are
grouped by category and paginated one group per unit.
"""

import math
from collections.abc import Sequence

from pydantic import ValidationError

from pubchem_gateway.client import PubChemGateway
from pubchem_gateway.context import RequestContext
from pubchem_gateway.exceptions import InvalidInputError, NotFoundError
from pubchem_gateway.fanout import FanoutOutcome, fan_out
from pubchem_gateway.normalizer import parse_xref_records
from pubchem_gateway.observer import GatewayObserver
from pubchem_gateway.schemas import (
    AggregatedXrefResult,
    XrefCategory,
    XrefGroup,
    XrefPagination,
    XrefQuery,
    XrefRecord,
    XrefValue,
)


def xref_path(cid: int, category: XrefCategory) -> str:
    return f"/compound/cid/{cid}/xrefs/{category.value}/JSON"


def group_records(
    records: Sequence[XrefRecord],
    order: Sequence[XrefCategory],
) -> list[XrefGroup]:
    """
    Group records by category, in ``order``.

    Categories without any record produce no group.
    """
    grouped: dict[XrefCategory, list[XrefValue]] = {}
    for record in records:
        grouped.setdefault(record.category, []).append(record.value)
    return [
        XrefGroup(category=category, values=grouped[category])
        for category in order
        if category in grouped
    ]


def paginate_groups(
    groups: Sequence[XrefGroup],
    page: int,
    page_size: int,
) -> tuple[list[XrefGroup], XrefPagination]:
    """Slice groups to one page; a page past the end is empty, not an error."""
    total_groups = len(groups)
    start = (page - 1) * page_size
    pagination = XrefPagination(
        current_page=page,
        page_size=page_size,
        total_groups=total_groups,
        total_pages=math.ceil(total_groups / page_size),
    )
    return list(groups[start : start + page_size]), pagination


class XrefAggregator:
    """
    Fetches and paginates cross-references for a compound.

    Example:
        async with PubChemGateway() as gateway:
            aggregator = XrefAggregator(gateway)
            result = await aggregator.fetch_cross_references(
                2244,
                [XrefCategory.RN, XrefCategory.PUBMED_ID],
                RequestContext.create("fetch_cross_references"),
            )
    """

    def __init__(
        self,
        gateway: PubChemGateway,
        observer: GatewayObserver | None = None,
        default_page_size: int | None = None,
    ):
        self._gateway = gateway
        self._observer = observer or gateway.observer
        if default_page_size is None:
            default_page_size = gateway.settings.xref_default_page_size
        self._default_page_size = default_page_size

    async def fetch_cross_references(
        self,
        cid: int,
        categories: Sequence[XrefCategory | str],
        context: RequestContext,
        page: int = 1,
        page_size: int | None = None,
    ) -> AggregatedXrefResult:
        """
        Get one page of cross-reference groups.

        Args:
            cid: PubChem Compound ID
            categories: Cross-reference types, in the order groups should appear
            context: Request context for tracing
            page: Page number (1-indexed)
            page_size: Groups per page (default from settings)

        Returns:
            AggregatedXrefResult with the requested page of groups

        Raises:
            InvalidInputError: If the arguments are invalid
            NotFoundError: If no category yielded any value
        """
        query = self._validate(cid, categories, page, page_size)
        self._observer.debug(
            f"Fetching {len(query.categories)} xref categories for CID {query.cid}",
            context,
            cid=query.cid,
            categories=[c.value for c in query.categories],
        )

        async def fetch_category(category: XrefCategory) -> list[XrefRecord]:
            payload = await self._gateway.fetch_json(xref_path(query.cid, category), context)
            return parse_xref_records(payload, category)

        outcomes = await fan_out(query.categories, fetch_category)
        records = self._collect(query.cid, outcomes, context)

        if not records:
            raise NotFoundError(
                f"No cross-references found for CID {query.cid} with the specified types.",
                details={
                    "cid": query.cid,
                    "categories": [c.value for c in query.categories],
                },
            )

        groups = group_records(records, query.categories)
        page_groups, pagination = paginate_groups(groups, query.page, query.page_size)

        self._observer.info(
            f"Successfully fetched page {query.page}/{pagination.total_pages} "
            f"of xrefs for CID {query.cid}.",
            context,
        )
        return AggregatedXrefResult(cid=query.cid, groups=page_groups, pagination=pagination)

    def _validate(
        self,
        cid: int,
        categories: Sequence[XrefCategory | str],
        page: int,
        page_size: int | None,
    ) -> XrefQuery:
        try:
            return XrefQuery(
                cid=cid,
                categories=list(categories),
                page=page,
                page_size=self._default_page_size if page_size is None else page_size,
            )
        except ValidationError as e:
            raise InvalidInputError(
                "Invalid cross-reference request",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    def _collect(
        self,
        cid: int,
        outcomes: Sequence[FanoutOutcome[XrefCategory, list[XrefRecord]]],
        context: RequestContext,
    ) -> list[XrefRecord]:
        """Flatten successful categories; log and skip failed ones."""
        records: list[XrefRecord] = []
        for outcome in outcomes:
            if outcome.ok:
                records.extend(outcome.value or [])
                continue
            self._observer.warning(
                f"Failed to fetch xref type '{outcome.item.value}' for CID {cid}",
                context,
                cid=cid,
                category=outcome.item.value,
                error=str(outcome.error),
                error_type=type(outcome.error).__name__,
            )
        return records

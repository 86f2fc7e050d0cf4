"""
Batch compound property lookup.

One property-table call per CID, run concurrently through the fan-out helper.
CIDs whose call fails are reported in ``missing_cids`` rather than failing
the batch.
"""

from collections.abc import Sequence

from pydantic import ValidationError

from pubchem_gateway.client import PubChemGateway
from pubchem_gateway.context import RequestContext
from pubchem_gateway.exceptions import InvalidInputError, NotFoundError
from pubchem_gateway.fanout import fan_out
from pubchem_gateway.normalizer import parse_property_rows
from pubchem_gateway.observer import GatewayObserver
from pubchem_gateway.schemas import CompoundPropertiesResult, PropertyQuery


def property_path(cid: int, properties: Sequence[str]) -> str:
    return f"/compound/cid/{cid}/property/{','.join(properties)}/JSON"


class CompoundPropertyLookup:
    """Fetches computed properties for several compounds at once."""

    def __init__(
        self,
        gateway: PubChemGateway,
        observer: GatewayObserver | None = None,
    ):
        self._gateway = gateway
        self._observer = observer or gateway.observer

    async def fetch_compound_properties(
        self,
        cids: Sequence[int],
        properties: Sequence[str],
        context: RequestContext,
    ) -> CompoundPropertiesResult:
        """
        Get property rows for each CID.

        Args:
            cids: PubChem Compound IDs
            properties: PUG REST property names, e.g. "MolecularWeight"
            context: Request context for tracing

        Returns:
            CompoundPropertiesResult with rows in CID order

        Raises:
            InvalidInputError: If the arguments are invalid
            NotFoundError: If no CID returned any properties
        """
        try:
            query = PropertyQuery(cids=list(cids), properties=list(properties))
        except ValidationError as e:
            raise InvalidInputError(
                "Invalid property lookup request",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

        async def fetch_one(cid: int) -> list[dict]:
            payload = await self._gateway.fetch_json(
                property_path(cid, query.properties), context
            )
            return parse_property_rows(payload)

        outcomes = await fan_out(query.cids, fetch_one)

        results: list[dict] = []
        missing: list[int] = []
        for outcome in outcomes:
            if outcome.ok and outcome.value:
                results.extend(outcome.value)
                continue
            if outcome.error is not None:
                self._observer.warning(
                    f"Failed to fetch properties for CID {outcome.item}",
                    context,
                    cid=outcome.item,
                    error=str(outcome.error),
                    error_type=type(outcome.error).__name__,
                )
            missing.append(outcome.item)

        if not results:
            raise NotFoundError(
                "Could not fetch properties for any of the provided CIDs.",
                details={"cids": query.cids},
            )

        self._observer.info(
            f"Successfully fetched properties for {len(results)} CIDs.",
            context,
        )
        return CompoundPropertiesResult(results=results, missing_cids=missing)

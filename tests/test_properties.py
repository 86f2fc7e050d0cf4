"""Tests for the batch compound property lookup."""

import pytest

from pubchem_gateway import (
    CompoundPropertyLookup,
    InvalidInputError,
    NotFoundError,
)
from pubchem_gateway.properties import property_path

MOCK_PROPERTIES_ASPIRIN = {"CID": 2244, "MolecularFormula": "C9H8O4", "MolecularWeight": "180.16"}
MOCK_PROPERTIES_IBUPROFEN = {"CID": 3672, "MolecularFormula": "C13H18O2", "MolecularWeight": "206.28"}
MOCK_PROPERTIES_CAFFEINE = {"CID": 2519, "MolecularFormula": "C8H10N4O2", "MolecularWeight": "194.19"}


def property_table(*rows: dict) -> dict:
    return {"PropertyTable": {"Properties": list(rows)}}


@pytest.fixture
def lookup(gateway):
    return CompoundPropertyLookup(gateway)


class TestFetchCompoundProperties:
    """Per-CID calls, flattened in CID order."""

    async def test_rows_returned_in_cid_order(
        self, lookup, mock_http_client, route, mock_http_response, context
    ):
        mock_http_client.get.side_effect = route(
            {
                "/cid/3672/": mock_http_response(200, property_table(MOCK_PROPERTIES_IBUPROFEN)),
                "/cid/2244/": mock_http_response(200, property_table(MOCK_PROPERTIES_ASPIRIN)),
                "/cid/2519/": mock_http_response(200, property_table(MOCK_PROPERTIES_CAFFEINE)),
            }
        )

        result = await lookup.fetch_compound_properties(
            [2244, 3672, 2519], ["MolecularFormula", "MolecularWeight"], context
        )

        assert [row["CID"] for row in result.results] == [2244, 3672, 2519]
        assert result.missing_cids == []
        assert mock_http_client.get.await_count == 3

    async def test_failed_cid_reported_missing(
        self, lookup, observer, mock_http_client, route, mock_http_response, context
    ):
        mock_http_client.get.side_effect = route(
            {
                "/cid/2244/": mock_http_response(200, property_table(MOCK_PROPERTIES_ASPIRIN)),
                "/cid/999999999/": mock_http_response(404),
                "/cid/2519/": mock_http_response(200, property_table(MOCK_PROPERTIES_CAFFEINE)),
            }
        )

        result = await lookup.fetch_compound_properties(
            [2244, 999999999, 2519], ["MolecularWeight"], context
        )

        assert [row["CID"] for row in result.results] == [2244, 2519]
        assert result.missing_cids == [999999999]
        [warning] = observer.warnings
        assert warning.fields["cid"] == 999999999

    async def test_empty_table_reported_missing_without_warning(
        self, lookup, observer, mock_http_client, route, mock_http_response, context
    ):
        mock_http_client.get.side_effect = route(
            {
                "/cid/2244/": mock_http_response(200, property_table(MOCK_PROPERTIES_ASPIRIN)),
                "/cid/5/": mock_http_response(200, property_table()),
            }
        )

        result = await lookup.fetch_compound_properties([2244, 5], ["MolecularWeight"], context)

        assert result.missing_cids == [5]
        assert observer.warnings == []

    async def test_nothing_returned_raises_not_found(
        self, lookup, mock_http_client, route, mock_http_response, context
    ):
        mock_http_client.get.side_effect = route(
            {
                "/cid/1/": mock_http_response(404),
                "/cid/2/": mock_http_response(503),
            }
        )

        with pytest.raises(NotFoundError) as exc_info:
            await lookup.fetch_compound_properties([1, 2], ["MolecularWeight"], context)

        assert exc_info.value.details["cids"] == [1, 2]

    async def test_unexpected_error_for_one_cid_is_skipped(
        self, lookup, observer, mock_http_client, route, mock_http_response, context
    ):
        mock_http_client.get.side_effect = route(
            {
                "/cid/2244/": mock_http_response(200, property_table(MOCK_PROPERTIES_ASPIRIN)),
                "/cid/3672/": KeyError("bug"),
            }
        )

        result = await lookup.fetch_compound_properties([2244, 3672], ["MolecularWeight"], context)

        assert result.results == [MOCK_PROPERTIES_ASPIRIN]
        assert result.missing_cids == [3672]
        [warning] = observer.warnings
        assert warning.fields["error_type"] == "KeyError"

    async def test_large_batch_is_not_capped(
        self, lookup, mock_http_client, mock_http_response, context
    ):
        mock_http_client.get.return_value = mock_http_response(
            200, property_table(MOCK_PROPERTIES_ASPIRIN)
        )

        cids = list(range(1, 151))
        result = await lookup.fetch_compound_properties(cids, ["MolecularWeight"], context)

        assert len(result.results) == 150
        assert mock_http_client.get.await_count == 150

    def test_property_path(self):
        assert property_path(2244, ["MolecularFormula", "XLogP"]) == (
            "/compound/cid/2244/property/MolecularFormula,XLogP/JSON"
        )


class TestInputValidation:
    """Invalid requests fail before any upstream call."""

    @pytest.mark.parametrize(
        "cids,properties",
        [
            ([], ["MolecularWeight"]),
            ([0], ["MolecularWeight"]),
            ([2244], []),
            ([2244], ["  "]),
        ],
    )
    async def test_invalid_input_rejected(self, lookup, mock_http_client, context, cids, properties):
        with pytest.raises(InvalidInputError):
            await lookup.fetch_compound_properties(cids, properties, context)

        mock_http_client.get.assert_not_called()

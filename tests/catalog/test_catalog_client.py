"""Tests for src/catalog/api_client.py"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from src.catalog.api_client import CatalogAPIClient, build_payload, encode_payload, parse_prices
from src.catalog.signing import SigningContext, sign_request
from src.common.errors import UpstreamError


@pytest.fixture
def client(settings, fixed_now):
    c = CatalogAPIClient(settings, clock=lambda: fixed_now)
    return c


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data if json_data is not None else {}
    response.text = text
    return response


class TestBuildPayload:
    def test_fields(self):
        payload = build_payload(["B0XXXXXXXX"], "mystore-21", "www.amazon.eg", ["ItemInfo.Title"])
        assert payload == {
            "ItemIds": ["B0XXXXXXXX"],
            "PartnerTag": "mystore-21",
            "PartnerType": "Associates",
            "Marketplace": "www.amazon.eg",
            "Resources": ["ItemInfo.Title"],
        }

    def test_languages_included_when_given(self):
        payload = build_payload(["B0XXXXXXXX"], "t", "m", [], languages=["ar_AE"])
        assert payload["LanguagesOfPreference"] == ["ar_AE"]

    def test_encoding_is_compact_utf8(self):
        body = encode_payload({"ItemIds": ["A"], "PartnerTag": "متجر"})
        assert body == '{"ItemIds":["A"],"PartnerTag":"متجر"}'.encode("utf-8")


class TestParsePrices:
    def test_extracts_first_listing_amount(self, catalog_response):
        assert parse_prices(catalog_response({"B0XXXXXXXX": 230})) == {"B0XXXXXXXX": 230.0}

    def test_item_without_offer_absent(self, catalog_response):
        result = parse_prices(catalog_response({"B0XXXXXXXX": 230, "B0YYYYYYYY": None}))
        assert result == {"B0XXXXXXXX": 230.0}

    def test_zero_price_kept(self, catalog_response):
        assert parse_prices(catalog_response({"B0XXXXXXXX": 0})) == {"B0XXXXXXXX": 0.0}

    def test_asin_uppercased(self, catalog_response):
        assert parse_prices(catalog_response({"b0xxxxxxxx": 10})) == {"B0XXXXXXXX": 10.0}

    def test_empty_listings(self):
        response = {"ItemsResult": {"Items": [{"ASIN": "B0XXXXXXXX", "OffersV2": {"Listings": []}}]}}
        assert parse_prices(response) == {}

    def test_non_numeric_amount_ignored(self):
        response = {"ItemsResult": {"Items": [
            {"ASIN": "B0XXXXXXXX", "OffersV2": {"Listings": [{"Price": {"Money": {"Amount": "n/a"}}}]}},
        ]}}
        assert parse_prices(response) == {}

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity", "1e999", float("nan"), float("inf")])
    def test_non_finite_amount_ignored(self, amount):
        response = {"ItemsResult": {"Items": [
            {"ASIN": "B0XXXXXXXX", "OffersV2": {"Listings": [{"Price": {"Money": {"Amount": amount}}}]}},
            {"ASIN": "B0YYYYYYYY", "OffersV2": {"Listings": [{"Price": {"Money": {"Amount": 200}}}]}},
        ]}}
        assert parse_prices(response) == {"B0YYYYYYYY": 200.0}

    @pytest.mark.parametrize("response", [
        {},
        None,
        [],
        {"ItemsResult": None},
        {"ItemsResult": {"Items": "oops"}},
        {"Errors": [{"Code": "InvalidParameterValue"}]},
    ])
    def test_malformed_yields_empty(self, response):
        assert parse_prices(response) == {}


class TestGetItems:
    def test_single_post_with_signed_headers(self, client, credentials, catalog_response):
        with patch.object(client.session, "post", return_value=_response(json_data=catalog_response({}))) as post:
            client.get_items(["B0XXXXXXXX"], credentials)

        assert post.call_count == 1
        args, kwargs = post.call_args
        assert args[0] == "https://webservices.amazon.eg/paapi5/getitems"
        headers = kwargs["headers"]
        assert headers["x-amz-date"] == "20240131T094500Z"
        assert headers["Authorization"].startswith(
            "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20240131/eu-west-1/ProductAdvertisingAPI/aws4_request"
        )

    def test_signature_covers_sent_bytes(self, client, credentials, catalog_response):
        with patch.object(client.session, "post", return_value=_response(json_data=catalog_response({}))) as post:
            client.get_items(["B0XXXXXXXX"], credentials)

        kwargs = post.call_args.kwargs
        unsigned = {k: v for k, v in kwargs["headers"].items() if k != "Authorization"}
        context = SigningContext(
            method="POST",
            path="/paapi5/getitems",
            headers=unsigned,
            payload=kwargs["data"],
            amz_date="20240131T094500Z",
            region="eu-west-1",
            service="ProductAdvertisingAPI",
            credentials=credentials,
        )
        assert kwargs["headers"]["Authorization"] == sign_request(context)

    def test_batch_payload(self, client, credentials, catalog_response):
        with patch.object(client.session, "post", return_value=_response(json_data=catalog_response({}))) as post:
            client.get_items(["B0XXXXXXXX", "B0YYYYYYYY"], credentials)

        body = json.loads(post.call_args.kwargs["data"])
        assert body["ItemIds"] == ["B0XXXXXXXX", "B0YYYYYYYY"]
        assert body["PartnerTag"] == "mystore-21"
        assert body["Resources"] == client.settings.batch_resources
        assert "LanguagesOfPreference" not in body

    def test_get_item_uses_item_resources(self, client, credentials, catalog_response):
        with patch.object(client.session, "post", return_value=_response(json_data=catalog_response({}))) as post:
            client.get_item("B0XXXXXXXX", credentials)

        body = json.loads(post.call_args.kwargs["data"])
        assert body["Resources"] == client.settings.item_resources
        assert body["LanguagesOfPreference"] == ["ar_AE"]

    def test_too_many_items_rejected(self, client, credentials):
        ids = [f"B0{i:08d}" for i in range(client.settings.max_items_per_request + 1)]
        with pytest.raises(ValueError, match="per-request limit"):
            client.get_items(ids, credentials)

    def test_http_error_raises_upstream(self, client, credentials):
        with patch.object(client.session, "post", return_value=_response(401, text="InvalidSignature")):
            with pytest.raises(UpstreamError) as exc_info:
                client.get_items(["B0XXXXXXXX"], credentials)

        assert exc_info.value.status_code == 401
        assert "InvalidSignature" in exc_info.value.body

    def test_timeout_raises_upstream(self, client, credentials):
        with patch.object(client.session, "post", side_effect=requests.exceptions.Timeout):
            with pytest.raises(UpstreamError, match="timeout"):
                client.get_items(["B0XXXXXXXX"], credentials)

    def test_connection_error_raises_upstream(self, client, credentials):
        with patch.object(client.session, "post", side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(UpstreamError, match="down"):
                client.get_items(["B0XXXXXXXX"], credentials)

    def test_no_retry_on_server_error(self, client, credentials):
        with patch.object(client.session, "post", return_value=_response(503, text="busy")) as post:
            with pytest.raises(UpstreamError):
                client.get_items(["B0XXXXXXXX"], credentials)
        assert post.call_count == 1

    def test_non_json_body_raises_upstream(self, client, credentials):
        response = _response(200, text="<html>")
        response.json.side_effect = ValueError("no json")
        with patch.object(client.session, "post", return_value=response):
            with pytest.raises(UpstreamError, match="non-JSON"):
                client.get_items(["B0XXXXXXXX"], credentials)


class TestFetchPrices:
    def test_returns_price_map(self, client, tenant, catalog_response):
        body = catalog_response({"B0XXXXXXXX": 230, "B0YYYYYYYY": None})
        with patch.object(client.session, "post", return_value=_response(json_data=body)):
            prices = client.fetch_prices(["B0XXXXXXXX", "B0YYYYYYYY"], tenant)

        assert prices == {"B0XXXXXXXX": 230.0}

    def test_empty_item_list_is_not_an_error(self, client, tenant):
        with patch.object(client.session, "post", return_value=_response(json_data={"ItemsResult": {"Items": []}})):
            assert client.fetch_prices(["B0XXXXXXXX"], tenant) == {}


class TestContextManager:
    def test_closes_session(self, settings):
        session = MagicMock()
        with CatalogAPIClient(settings, session=session):
            pass
        session.close.assert_called_once()

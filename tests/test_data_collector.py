"""Tests for the Google Ads REST collector with mocked HTTP calls."""

import os
import sys
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import TOKEN_URL, GoogleAdsSettings
from src.data_collector import GoogleAdsApiError, GoogleAdsCollector

SETTINGS = GoogleAdsSettings(
    developer_token="dev-token",
    login_customer_id="1112223333",
    client_id="client-id",
    client_secret="client-secret",
    api_version="v17",
)


def _response(status_code=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload
    resp.text = text
    return resp


class TestAccessToken:
    def test_refresh_token_grant(self):
        session = MagicMock()
        session.post.return_value = _response(payload={"access_token": "ya29.abc"})
        collector = GoogleAdsCollector(SETTINGS, "1//refresh", session=session)

        assert collector.get_access_token() == "ya29.abc"
        session.post.assert_called_once_with(
            TOKEN_URL,
            data={
                "client_id": "client-id",
                "client_secret": "client-secret",
                "refresh_token": "1//refresh",
                "grant_type": "refresh_token",
            },
        )

    def test_error_raises_with_body(self):
        session = MagicMock()
        session.post.return_value = _response(400, payload={"error": "invalid_grant"})
        collector = GoogleAdsCollector(SETTINGS, "1//refresh", session=session)

        with pytest.raises(GoogleAdsApiError) as exc:
            collector.get_access_token()
        assert exc.value.status_code == 400
        assert exc.value.body == {"error": "invalid_grant"}

    def test_each_call_exchanges_again(self):
        session = MagicMock()
        session.post.return_value = _response(payload={"access_token": "ya29.abc"})
        collector = GoogleAdsCollector(SETTINGS, "1//refresh", session=session)
        collector.get_access_token()
        collector.get_access_token()
        assert session.post.call_count == 2


class TestSearchStream:
    def test_headers_and_flattening(self):
        session = MagicMock()
        session.post.return_value = _response(payload=[
            {"results": [{"campaign": {"id": "1"}}, {"campaign": {"id": "2"}}]},
            {"results": [{"campaign": {"id": "3"}}]},
            {"fieldMask": "campaign.id"},
        ])
        collector = GoogleAdsCollector(SETTINGS, "1//refresh", session=session)

        rows = collector.search_stream("123-456-7890", "  SELECT campaign.id FROM campaign ", "ya29.abc")

        assert [r["campaign"]["id"] for r in rows] == ["1", "2", "3"]
        args, kwargs = session.post.call_args
        assert args[0] == (
            "https://googleads.googleapis.com/v17/customers/1234567890/googleAds:searchStream"
        )
        assert kwargs["json"] == {"query": "SELECT campaign.id FROM campaign"}
        assert kwargs["headers"]["Authorization"] == "Bearer ya29.abc"
        assert kwargs["headers"]["developer-token"] == "dev-token"
        assert kwargs["headers"]["login-customer-id"] == "1112223333"

    def test_single_object_response(self):
        session = MagicMock()
        session.post.return_value = _response(payload={"results": [{"campaign": {"id": "9"}}]})
        collector = GoogleAdsCollector(SETTINGS, "1//refresh", session=session)
        rows = collector.search_stream("123", "SELECT campaign.id FROM campaign", "t")
        assert rows == [{"campaign": {"id": "9"}}]

    def test_error_raises(self):
        session = MagicMock()
        resp = _response(403, text="PERMISSION_DENIED")
        resp.json.side_effect = ValueError("not json")
        session.post.return_value = resp
        collector = GoogleAdsCollector(SETTINGS, "1//refresh", session=session)

        with pytest.raises(GoogleAdsApiError) as exc:
            collector.search_stream("123", "SELECT campaign.id FROM campaign", "t")
        assert exc.value.status_code == 403
        assert exc.value.body == "PERMISSION_DENIED"


class TestCampaignRows:
    def test_token_then_query_with_preset(self):
        session = MagicMock()
        session.post.side_effect = [
            _response(payload={"access_token": "ya29.abc"}),
            _response(payload=[{"results": [{"campaign": {"id": "1"}}]}]),
        ]
        collector = GoogleAdsCollector(SETTINGS, "1//refresh", session=session)

        rows = collector.get_campaign_rows("123", "last_7d")

        assert rows == [{"campaign": {"id": "1"}}]
        query = session.post.call_args_list[1].kwargs["json"]["query"]
        assert "FROM campaign" in query
        assert "DURING LAST_7_DAYS" in query
        assert "metrics.cost_micros" in query

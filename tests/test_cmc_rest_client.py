import unittest
from unittest.mock import MagicMock

import requests

from cryptocard.errors import ConfigurationError, UpstreamError
from cryptocard.integrations.cmc_rest import CoinMarketCapRestClient


def _response(status_code: int, payload) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


class TestCoinMarketCapRestClient(unittest.TestCase):
    def _client(self, session, **kwargs):
        return CoinMarketCapRestClient(
            api_key="cmc-key",
            session=session,
            base_url="https://example.test",
            **kwargs,
        )

    def test_missing_key_is_configuration_error(self):
        for key in (None, ""):
            with self.subTest(key=key):
                session = MagicMock()
                with self.assertRaises(ConfigurationError) as ctx:
                    CoinMarketCapRestClient(api_key=key, session=session)
                self.assertEqual(str(ctx.exception), "API key not configured")
                session.get.assert_not_called()

    def test_unknown_api_version_rejected(self):
        with self.assertRaises(ValueError):
            CoinMarketCapRestClient(api_key="cmc-key", api_version="v9")

    def test_get_quotes_latest_uses_cmc_contract(self):
        session = MagicMock()
        payload = {"data": {"BTC": {"symbol": "BTC"}}, "status": {"error_code": 0}}
        session.get.return_value = _response(200, payload)

        result = self._client(session).get_quotes_latest("btc")

        self.assertEqual(result, payload)
        session.get.assert_called_once_with(
            "https://example.test/v1/cryptocurrency/quotes/latest",
            headers={"X-CMC_PRO_API_KEY": "cmc-key", "Accept": "application/json"},
            params={"symbol": "BTC", "convert": "USD"},
            timeout=5.0,
        )

    def test_quotes_follow_configured_api_version(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"data": {}})

        self._client(session, api_version="v2").get_quotes_latest("ETH")

        self.assertEqual(
            session.get.call_args.args[0],
            "https://example.test/v2/cryptocurrency/quotes/latest",
        )

    def test_get_listings_latest_passes_limit(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"data": []})

        self._client(session, api_version="v2", timeout=2.0).get_listings_latest(20)

        session.get.assert_called_once_with(
            "https://example.test/v1/cryptocurrency/listings/latest",
            headers={"X-CMC_PRO_API_KEY": "cmc-key", "Accept": "application/json"},
            params={"limit": 20, "convert": "USD"},
            timeout=2.0,
        )

    def test_non_success_status_raises_upstream_error_with_provider_message(self):
        session = MagicMock()
        session.get.return_value = _response(
            401,
            {"status": {"error_code": 1001, "error_message": "This API Key is invalid."}},
        )

        with self.assertRaises(UpstreamError) as ctx:
            self._client(session).get_quotes_latest("BTC")

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.detail, "This API Key is invalid.")
        self.assertIn("401", str(ctx.exception))
        self.assertEqual(session.get.call_count, 1)

    def test_non_json_error_body_still_raises(self):
        session = MagicMock()
        response = _response(502, None)
        response.json.side_effect = ValueError("not json")
        session.get.return_value = response

        with self.assertRaises(UpstreamError) as ctx:
            self._client(session).get_listings_latest(10)

        self.assertEqual(ctx.exception.status_code, 502)
        self.assertIsNone(ctx.exception.detail)

    def test_transport_failure_is_upstream_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(UpstreamError) as ctx:
            self._client(session).get_quotes_latest("BTC")

        self.assertIsNone(ctx.exception.status_code)
        self.assertEqual(session.get.call_count, 1)


if __name__ == "__main__":
    unittest.main()

# coingecko_client.py
from typing import Dict, Any, List, Optional
import requests
from loguru import logger

from Your_bags_tracker.configuration_manager import DEFAULT_API_BASE_URL


class CoinGeckoError(Exception):
    """Base exception for price service failures."""

    pass


class PriceServiceError(CoinGeckoError):
    """Raised when the price endpoint fails or answers with a non-success status."""

    pass


class CatalogServiceError(CoinGeckoError):
    """Raised when a search, listing or detail request fails."""

    pass


class CoinGeckoClient:
    """Thin wrapper over the CoinGecko v3 REST endpoints used by the tracker."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: Optional[float] = None,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"accept": "application/json"})
        if api_key:
            self.session.headers.update({"x-cg-demo-api-key": api_key})

    def _get(self, path: str, params: Optional[Dict[str, Any]], error_cls):
        url = f"{self.base_url}{path}"
        logger.debug(f"🌐 GET {url} params={params}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            raise error_cls(f"CoinGecko returned HTTP {status} for {path}") from e
        except requests.exceptions.RequestException as e:
            raise error_cls(f"Request to CoinGecko {path} failed: {e}") from e
        except ValueError as e:
            raise error_cls(f"Invalid JSON from CoinGecko {path}: {e}") from e

    def simple_price(
        self, ids: List[str], include_24hr_change: bool = False
    ) -> Dict[str, Dict[str, Any]]:
        """GET /simple/price for the given ids, priced in USD."""
        params = {"ids": ",".join(ids), "vs_currencies": "usd"}
        if include_24hr_change:
            params["include_24hr_change"] = "true"
        data = self._get("/simple/price", params, PriceServiceError)
        if not isinstance(data, dict):
            raise PriceServiceError("Unexpected /simple/price payload")
        return data

    def search(self, query: str) -> List[Dict[str, Any]]:
        data = self._get("/search", {"query": query}, CatalogServiceError)
        if not isinstance(data, dict):
            raise CatalogServiceError("Unexpected /search payload")
        return data.get("coins") or []

    def coins_list(self) -> List[Dict[str, Any]]:
        data = self._get("/coins/list", None, CatalogServiceError)
        if not isinstance(data, list):
            raise CatalogServiceError("Unexpected /coins/list payload")
        return data

    def coin_detail(self, coin_id: str) -> Dict[str, Any]:
        params = {
            "localization": "false",
            "tickers": "false",
            "community_data": "false",
            "developer_data": "false",
        }
        data = self._get(f"/coins/{coin_id}", params, CatalogServiceError)
        if not isinstance(data, dict):
            raise CatalogServiceError(f"Unexpected /coins/{coin_id} payload")
        return data

# storefront/services/address_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import ADDRESS_VALIDATION_URL, ADDRESS_VALIDATION_API_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddressClient:
    """
    Sprawdza adres wysylki w zewnetrznym serwisie geokodowania.
    Bez skonfigurowanego URL kazdy kompletny adres jest akceptowany.
    """

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: int = 2):
        self.base_url = (base_url if base_url is not None else ADDRESS_VALIDATION_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else ADDRESS_VALIDATION_API_KEY
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    @http_retry()
    def _geocode(self, address: dict) -> dict:
        location = ",".join(
            address.get(f) or "" for f in ("city", "postal_code", "country")
        )
        logger.info(f"AddressClient GET {self.base_url} location={location}")

        resp = requests.get(
            self.base_url,
            params={"key": self.api_key, "location": location, "outFormat": "json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def is_valid(self, address: dict) -> bool:
        if not self.enabled:
            return True

        data = self._geocode(address)
        try:
            locations = data["results"][0]["locations"]
        except (KeyError, IndexError, TypeError):
            return False
        if not locations:
            return False

        best = locations[0]
        city = (best.get("adminArea5") or "").lower()
        postal_code = (best.get("postalCode") or "").lower()
        return (
            city == address["city"].strip().lower()
            and postal_code == address["postal_code"].strip().lower()
        )

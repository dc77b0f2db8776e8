# app/services/product_client.py
from decimal import Decimal

import requests
from requests import RequestException

from app.domain.errors import NotFound, StoreUnavailable
from app.domain.schemas import ProductSnapshot
from app.utils.retry import http_retry
from app.utils.settings import PRODUCT_SERVICE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """
    Odczyt produktow z product-service: cena, stan, sklep, punkty.
    Tylko do odczytu, rdzen nigdy nie zmienia produktu.
    """

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _get(self, url: str) -> requests.Response:
        logger.info(f"ProductClient GET {url}")
        resp = requests.get(url, timeout=self.timeout)
        #404 to odpowiedz, nie blad transportu - nie ponawiamy
        if resp.status_code != 404:
            resp.raise_for_status()
        return resp

    def fetch_product(self, product_id: int) -> ProductSnapshot:
        url = f"{self.base_url}/products/{product_id}"
        try:
            resp = self._get(url)
        except RequestException as e:
            logger.error(f"Product service unavailable for {product_id}: {e}")
            raise StoreUnavailable("Serwis produktow jest niedostepny") from e

        if resp.status_code == 404:
            raise NotFound(f"Produkt {product_id} nie istnieje")

        data = resp.json()
        return ProductSnapshot(
            id=data["id"],
            name=data.get("name", ""),
            price=Decimal(str(data["price"])),
            stock=int(data.get("stock", 0)),
            store_id=data.get("store_id"),
            point_yield=int(data.get("point_yield", 0)),
        )

    def fetch_many(self, product_ids, strict: bool = False) -> dict[int, ProductSnapshot]:
        """
        Produkty do podsumowania koszyka. Domyslnie brakujace/niedostepne sa pomijane
        (widok), strict=True przepuszcza NotFound/StoreUnavailable (checkout).
        """
        if strict:
            return {pid: self.fetch_product(pid) for pid in set(product_ids)}

        products = {}
        for product_id in set(product_ids):
            try:
                products[product_id] = self.fetch_product(product_id)
            except (NotFound, StoreUnavailable) as e:
                logger.warning(f"Brak danych produktu {product_id} w podsumowaniu: {e}")
        return products

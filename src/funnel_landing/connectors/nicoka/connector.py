"""Nicoka CRM connector.

Nicoka exposes a bearer-token REST API at https://{subdomain}.nicoka.com/api.
Listings are paginated with limit/offset and answer {"data": [...], "pages": n,
"total": n}. The API throttles with HTTP 429, so page calls are spaced by a
fixed delay and a 429 is retried after a fixed backoff, a bounded number of
times. Customers and projects change rarely and are cached for ten minutes
to label quotations, orders and opportunities.
"""

import logging
import time
from typing import Any, Callable, Iterator, Optional

import httpx

from funnel_landing.connectors.base import CrmDataSource
from funnel_landing.connectors.reference_cache import TTLCache
from funnel_landing.errors import SourceUnavailableError
from funnel_landing.models.raw import RawRecord
from funnel_landing.models.records import Customer, Opportunity, Order, Project, Quotation
from funnel_landing.status_maps import DEFAULT_STATUS_MAPS, StatusMaps

from . import constants
from .parsers import (
    customer_from_item,
    opportunity_from_item,
    order_from_item,
    project_from_item,
    quotation_from_item,
)

logger = logging.getLogger(__name__)


class NicokaConnector(CrmDataSource):
    """
    Connector for the Nicoka sales CRM.
    Every list_* call restarts pagination from offset 0.
    """

    source_id = "nicoka"

    DEFAULT_HEADERS = {
        "User-Agent": "funnel-landing/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        subdomain: str = constants.DEFAULT_SUBDOMAIN,
        api_token: Optional[str] = None,
        *,
        client: Optional[httpx.Client] = None,
        status_maps: StatusMaps = DEFAULT_STATUS_MAPS,
        page_size: int = constants.PAGE_SIZE,
        rate_limit_delay: float = constants.RATE_LIMIT_DELAY,
        retry_delay: float = constants.RETRY_DELAY,
        max_retries: int = constants.MAX_RETRIES,
        reference_ttl: float = constants.REFERENCE_TTL,
        timeout: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            subdomain: Nicoka tenant, e.g. rubix-consulting
            api_token: Bearer token; requests fail with SourceUnavailableError without one
            client: Optional httpx client
            status_maps: Label tables for status, stage and type codes
            sleep: Injected for tests; used for rate limiting and retry backoff
        """
        self.base_url = constants.BASE_URL_TEMPLATE.format(subdomain=subdomain)
        self._api_token = api_token
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers=self.DEFAULT_HEADERS,
        )
        self.status_maps = status_maps
        self.page_size = page_size
        self.rate_limit_delay = rate_limit_delay
        self.retry_delay = retry_delay
        self.max_retries = max_retries
        self._sleep = sleep
        self._customers_cache: TTLCache[dict[int, Customer]] = TTLCache(reference_ttl)
        self._projects_cache: TTLCache[dict[int, Project]] = TTLCache(reference_ttl)

    def _headers(self) -> dict[str, str]:
        if not self._api_token:
            raise SourceUnavailableError("NICOKA_API_TOKEN is not configured")
        return {"Authorization": f"Bearer {self._api_token}"}

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET with retry on 429. Any other failure is fatal to the fetch."""
        headers = self._headers()
        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self._client.get(url, params=params, headers=headers)
            except httpx.RequestError as e:
                raise SourceUnavailableError(f"Nicoka API unreachable: {e}") from e
            if resp.status_code == 429:
                logger.warning(
                    "Nicoka throttled %s (attempt %d/%d), retrying in %.1fs",
                    url, attempt, self.max_retries, self.retry_delay,
                )
                self._sleep(self.retry_delay)
                continue
            if not resp.is_success:
                raise SourceUnavailableError(f"Nicoka API error: {resp.status_code} - {resp.text}")
            try:
                return resp.json()
            except ValueError as e:
                raise SourceUnavailableError(f"Nicoka API returned invalid JSON for {url}") from e
        raise SourceUnavailableError("Nicoka API: max retries exceeded")

    def iter_raw(self, endpoint: str, params: Optional[dict[str, str]] = None) -> Iterator[RawRecord]:
        """Walk every page of a listing endpoint."""
        url = self.base_url + endpoint
        offset = 0
        while True:
            query = {**(params or {}), "limit": str(self.page_size), "offset": str(offset)}
            payload = self._get_json(url, query)
            data = payload.get("data", payload) if isinstance(payload, dict) else payload
            if not isinstance(data, list):
                break
            logger.debug("Fetched %d items from %s (offset=%d)", len(data), endpoint, offset)
            for item in data:
                yield RawRecord(data=item)

            if not isinstance(payload, dict) or not payload.get("pages"):
                break
            if offset + self.page_size >= (payload.get("total") or 0):
                break
            offset += self.page_size
            self._sleep(self.rate_limit_delay)

    def _load_customers(self) -> dict[int, Customer]:
        customers = {}
        for raw in self.iter_raw(constants.CUSTOMERS):
            customer = customer_from_item(raw.data)
            customers[customer.customer_id] = customer
        logger.info("Loaded %d customers", len(customers))
        return customers

    def _load_projects(self) -> dict[int, Project]:
        projects = {}
        for raw in self.iter_raw(constants.PROJECTS):
            project = project_from_item(raw.data)
            projects[project.project_id] = project
        logger.info("Loaded %d projects", len(projects))
        return projects

    def customers_by_id(self) -> dict[int, Customer]:
        """Customer lookup, served from the reference cache while fresh."""
        return self._customers_cache.get_or_load(self._load_customers)

    def projects_by_id(self) -> dict[int, Project]:
        """Project lookup, served from the reference cache while fresh."""
        return self._projects_cache.get_or_load(self._load_projects)

    def list_customers(self) -> Iterator[Customer]:
        return iter(list(self.customers_by_id().values()))

    def list_projects(self) -> Iterator[Project]:
        return iter(list(self.projects_by_id().values()))

    def list_quotations(self) -> Iterator[Quotation]:
        customers = self.customers_by_id()
        for raw in self.iter_raw(constants.QUOTATIONS):
            yield quotation_from_item(raw.data, customers, self.status_maps)

    def list_orders(self) -> Iterator[Order]:
        customers = self.customers_by_id()
        projects = self.projects_by_id()
        for raw in self.iter_raw(constants.ORDERS):
            yield order_from_item(raw.data, customers, projects, self.status_maps)

    def list_opportunities(self) -> Iterator[Opportunity]:
        customers = self.customers_by_id()
        for raw in self.iter_raw(constants.OPPORTUNITIES):
            yield opportunity_from_item(raw.data, customers, self.status_maps)

    def close(self) -> None:
        self._client.close()

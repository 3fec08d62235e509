"""Nicoka REST API constants."""

DEFAULT_SUBDOMAIN = "rubix-consulting"
BASE_URL_TEMPLATE = "https://{subdomain}.nicoka.com/api"

# Endpoints
CUSTOMERS = "/customers"
PROJECTS = "/projects"
QUOTATIONS = "/quotations"
ORDERS = "/orders"
OPPORTUNITIES = "/opportunities"

# Pagination & throttling
PAGE_SIZE = 200
RATE_LIMIT_DELAY = 0.1  # seconds between page calls
RETRY_DELAY = 0.5  # seconds after a 429
MAX_RETRIES = 3
REFERENCE_TTL = 600  # seconds for customers / projects lookups

"""Storefront bounded context: catalogue, cart, address book, shipping and orders.

The domain is initialized by the application entrypoint (``src/app.py``) or
by the test fixtures. PROTEAN_ENV selects the configuration overlay in
``domain.toml``.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")

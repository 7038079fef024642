# shopdash/services/container.py

"""Wires the shared API client, cache and session into the services."""

from dataclasses import dataclass

from shopdash.api.client import ApiClient
from shopdash.auth.session import SessionStore
from shopdash.services.cart_service import CartService, Notifier
from shopdash.services.cart_view import CartViewController
from shopdash.services.product_service import ProductService
from shopdash.storage.query_cache import QueryCache


@dataclass
class Services:
    """Everything a screen or CLI command needs to talk to the API."""

    api: ApiClient
    cache: QueryCache
    session: SessionStore
    products: ProductService
    cart: CartService
    cart_view: CartViewController

    def sign_out(self) -> None:
        self.session.sign_out()
        self.cache.clear()

    def close(self) -> None:
        self.api.close()


def build_services(
    api: ApiClient | None = None,
    session: SessionStore | None = None,
    notify: Notifier | None = None,
) -> Services:
    """Create one cache and one session shared by every service."""
    api = api or ApiClient()
    cache = QueryCache()
    session = session or SessionStore()
    cart = CartService(api, cache, session, notify=notify)
    return Services(
        api=api,
        cache=cache,
        session=session,
        products=ProductService(api, cache, session),
        cart=cart,
        cart_view=CartViewController(cart),
    )

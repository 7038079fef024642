# shopdash/ui/app.py

"""Terminal dashboard for the product catalog and cart."""

import logging

from textual.app import App
from textual.binding import Binding

from shopdash.auth.session import CredentialsProvider
from shopdash.services.container import Services, build_services
from shopdash.ui.screens import (
    CartScreen,
    LoginScreen,
    ProductsScreen,
)

logger = logging.getLogger("shopdash.ui")


class DashboardApp(App[None]):
    """Terminal UI for the product dashboard."""

    CSS_PATH = "styles.tcss"
    TITLE = "Product Dashboard"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+k", "open_cart", "Cart"),
        Binding("ctrl+l", "sign_out", "Logout"),
    ]

    def __init__(
        self,
        services: Services | None = None,
        credentials: CredentialsProvider | None = None,
    ) -> None:
        super().__init__()
        self.services = services or build_services(notify=self.notify)
        self.credentials = credentials or CredentialsProvider()

    def on_mount(self) -> None:
        """Start on the product list when already signed in."""
        if self.services.session.is_authenticated:
            self.push_screen(ProductsScreen())
        else:
            self.push_screen(LoginScreen())

    def on_unmount(self) -> None:
        self.services.close()

    def sign_in(self, email: str, password: str) -> bool:
        """Authorize credentials and open the product list."""
        identity = self.credentials.authorize(email, password)
        if identity is None:
            return False
        self.services.session.sign_in(identity)
        self._refresh_subtitle()
        self.switch_screen(ProductsScreen())
        return True

    def back_to_products(self) -> None:
        """Pop screens until the product list is on top."""
        while (
            not isinstance(self.screen, ProductsScreen)
            and len(self.screen_stack) > 2
        ):
            self.pop_screen()
        if not isinstance(self.screen, ProductsScreen):
            self.switch_screen(ProductsScreen())

    def action_open_cart(self) -> None:
        if not self.services.session.is_authenticated:
            self.notify("Sign in first", severity="warning")
            return
        if isinstance(self.screen, CartScreen):
            return
        self.push_screen(CartScreen())

    def action_sign_out(self) -> None:
        """Clear the session and cache, then return to the login screen."""
        self.services.sign_out()
        self._refresh_subtitle()
        while len(self.screen_stack) > 2:
            self.pop_screen()
        if not isinstance(self.screen, LoginScreen):
            self.switch_screen(LoginScreen())

    def _refresh_subtitle(self) -> None:
        identity = self.services.session.current
        self.sub_title = identity.email if identity else ""

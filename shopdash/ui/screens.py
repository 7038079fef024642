# shopdash/ui/screens.py

"""Dashboard screens: login, products, detail, product forms and cart."""

import asyncio
import logging
import webbrowser
from typing import Any, cast

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
    TextArea,
)

from shopdash.api.errors import DashboardError, FormValidationError
from shopdash.config.settings import Settings
from shopdash.filters.product_table import ProductTable
from shopdash.forms.image_selection import NewImage
from shopdash.forms.product_form import (
    CreateProductForm,
    EditProductForm,
    ProductForm,
)
from shopdash.models.product import Product
from shopdash.services.cart_view import UNAVAILABLE_HINT, CartRow
from shopdash.services.container import Services
from shopdash.ui.gallery import Gallery
from shopdash.utils.image_urls import format_price, transform_image_url

logger = logging.getLogger("shopdash.ui")


class DashboardScreen(Screen[None]):
    """Base screen with typed access to the app's services."""

    @property
    def services(self) -> Services:
        return cast(Services, cast(Any, self.app).services)

    def go_to_products(self) -> None:
        cast(Any, self.app).back_to_products()


# ── Login ────────────────────────────────────────────────


class LoginScreen(DashboardScreen):
    """Email/password sign-in."""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static("Sign in to the Product Dashboard", id="login_title"),
            Input(placeholder="Email", id="email_input"),
            Input(placeholder="Password", password=True, id="password_input"),
            Button("Sign in", variant="primary", id="login_btn"),
            Static("", id="login_error", classes="error"),
            id="login_box",
        )
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login_btn":
            self._attempt()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._attempt()

    def _attempt(self) -> None:
        email = self.query_one("#email_input", Input).value
        password = self.query_one("#password_input", Input).value
        if not cast(Any, self.app).sign_in(email, password):
            self.query_one("#login_error", Static).update(
                "Invalid email or password"
            )


# ── Confirmation modal ───────────────────────────────────


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no confirmation dialog."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, title: str, description: str) -> None:
        super().__init__()
        self.title_text = title
        self.body_text = description

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self.title_text, id="confirm_title"),
            Static(self.body_text, id="confirm_description"),
            Horizontal(
                Button("Cancel", id="confirm_no"),
                Button("Delete", variant="error", id="confirm_yes"),
                id="confirm_buttons",
            ),
            id="confirm_dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm_yes")

    def action_cancel(self) -> None:
        self.dismiss(False)


# ── Products list ────────────────────────────────────────


class ProductsScreen(DashboardScreen):
    """Product list with a grid view and a sortable, paged table view."""

    AUTO_FOCUS = "#products_table"

    BINDINGS = [
        Binding("slash", "focus_filter", "Search"),
        Binding("n", "new_product", "Add Product"),
        Binding("v", "toggle_view", "Grid/Table"),
        Binding("a", "add_to_cart", "Add to cart"),
        Binding("e", "edit_product", "Edit"),
        Binding("d", "delete_product", "Delete"),
        Binding("s", "sort('name')", "Sort name"),
        Binding("p", "sort('price')", "Sort price"),
        Binding("left_square_bracket", "previous_page", "Prev page"),
        Binding("right_square_bracket", "next_page", "Next page"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.view_mode: str = "grid"
        self.table_state = ProductTable()
        self.products: list[Product] = []
        self.visible_products: list[Product] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static("Products", id="title"),
            Input(placeholder="Search products...", id="filter_input"),
            Static("Loading products...", id="status"),
            DataTable(
                id="products_table",
                zebra_stripes=True,
                cursor_type="row",
            ),
            Static("", id="page_info"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._apply_view()

    def on_screen_resume(self) -> None:
        """Refetch whenever the list comes back into view."""
        self.run_worker(self.load_products(), exclusive=True)

    async def load_products(self) -> None:
        status = self.query_one("#status", Static)
        status.update("Loading products...")
        try:
            products = await asyncio.to_thread(
                self.services.products.list_products
            )
        except DashboardError as exc:
            logger.error("Failed to load products: %s", exc, exc_info=True)
            status.update("Failed to load products. Check backend or auth.")
            return
        if products is None:
            status.update("Sign in to see products.")
            return
        self.products = products
        self.table_state.set_products(products)
        if not products:
            status.update(
                'No products found. Press "n" to add one.'
            )
        else:
            status.update(f"{len(products)} products")
        self.populate_table()

    def _apply_view(self) -> None:
        self.query_one("#filter_input", Input).display = (
            self.view_mode == "table"
        )
        self.query_one("#page_info", Static).display = (
            self.view_mode == "table"
        )
        self.populate_table()
        # Single-key bindings only fire while the table, not the filter, has focus
        self.query_one("#products_table", DataTable).focus()

    def populate_table(self) -> None:
        """Fill the DataTable for the current view mode."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        table.clear(columns=True)

        if self.view_mode == "grid":
            table.add_columns("Image", "Name", "Price")
            self.visible_products = list(self.products)
            for p in self.visible_products:
                table.add_row(
                    transform_image_url(p.main_image, 400, 300) or "—",
                    p.name,
                    Text(format_price(p.price), style="bold"),
                )
            return

        state = self.table_state
        table.add_columns(
            "Image",
            f"Name {state.sort_indicator('name')}".strip(),
            f"Price {state.sort_indicator('price')}".strip(),
            "Description",
        )
        self.visible_products = state.page_rows()
        for p in self.visible_products:
            table.add_row(
                p.main_image or "No Image",
                p.name,
                format_price(p.price),
                p.description.strip() or "—",
            )
        if not self.visible_products:
            table.add_row("", "No products found", "", "")
        self.query_one("#page_info", Static).update(
            f"Page {state.page_index + 1} of {state.page_count}"
        )

    def selected_product(self) -> Product | None:
        table = self.query_one("#products_table", DataTable)
        row = table.cursor_row
        if 0 <= row < len(self.visible_products):
            return self.visible_products[row]
        return None

    # ── Events ───────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "filter_input":
            self.table_state.set_filter(event.value)
            self.populate_table()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the selected product's detail view."""
        if 0 <= event.cursor_row < len(self.visible_products):
            product = self.visible_products[event.cursor_row]
            self.app.push_screen(ProductDetailScreen(product.id))

    # ── Actions ──────────────────────────────────────────

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "filter_input":
            self.query_one("#products_table", DataTable).focus()

    def action_focus_filter(self) -> None:
        if self.view_mode == "table":
            self.query_one("#filter_input", Input).focus()

    def action_toggle_view(self) -> None:
        self.view_mode = "table" if self.view_mode == "grid" else "grid"
        self._apply_view()

    def action_sort(self, column: str) -> None:
        if self.view_mode != "table":
            return
        self.table_state.toggle_sort(column)
        self.populate_table()

    def action_next_page(self) -> None:
        self.table_state.next_page()
        self.populate_table()

    def action_previous_page(self) -> None:
        self.table_state.previous_page()
        self.populate_table()

    def action_reload(self) -> None:
        self.services.cache.invalidate(("products",))
        self.run_worker(self.load_products(), exclusive=True)

    def action_new_product(self) -> None:
        form = CreateProductForm(self.services.products)
        self.app.push_screen(ProductFormScreen(form))

    def action_edit_product(self) -> None:
        product = self.selected_product()
        if product is not None:
            form = EditProductForm(self.services.products, product.id)
            self.app.push_screen(ProductFormScreen(form))

    def action_add_to_cart(self) -> None:
        product = self.selected_product()
        if product is not None:
            self.run_worker(_add_to_cart(self.services, product.id))

    def action_delete_product(self) -> None:
        product = self.selected_product()
        if product is None:
            return

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self._delete(product))

        self.app.push_screen(
            ConfirmScreen(
                "Are you sure?", f'Delete "{product.name}" permanently?'
            ),
            on_confirm,
        )

    async def _delete(self, product: Product) -> None:
        try:
            await asyncio.to_thread(
                self.services.products.delete_product, product.id
            )
        except DashboardError as exc:
            logger.error(
                "Delete failed for %s", product.id, exc_info=True
            )
            self.notify(f"Delete failed: {exc}", severity="error")
            return
        self.notify(f'Deleted "{product.name}"')
        await self.load_products()


async def _add_to_cart(services: Services, product_id: str) -> None:
    """Add one unit; the cart service reports the outcome itself."""
    try:
        await asyncio.to_thread(services.cart.add_item, product_id)
    except DashboardError:
        logger.debug("Add to cart for %s failed", product_id)


# ── Product detail ───────────────────────────────────────


class ProductDetailScreen(DashboardScreen):
    """One product with its image gallery."""

    BINDINGS = [
        Binding("escape", "back", "Back to Products"),
        Binding("left_square_bracket", "previous_image", "Prev image"),
        Binding("right_square_bracket", "next_image", "Next image"),
        Binding("o", "open_image", "Open image"),
        Binding("a", "add_to_cart", "Add to cart"),
        Binding("e", "edit", "Edit"),
    ]

    def __init__(self, product_id: str) -> None:
        super().__init__()
        self.product_id = product_id
        self.product: Product | None = None
        self.gallery = Gallery()

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(
            Static("Loading product...", id="detail_status"),
            Static("", id="detail_name"),
            Static("", id="detail_price"),
            Static("", id="detail_description"),
            Static("", id="gallery_main"),
            Static("", id="gallery_caption"),
            Static("", id="gallery_thumbs"),
            Horizontal(
                Button("Add to cart", variant="primary", id="add_btn"),
                Button("Edit", id="edit_btn"),
                Button("Back to Products", id="back_btn"),
                id="detail_actions",
            ),
            id="detail_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.run_worker(self.load_product(), exclusive=True)

    async def load_product(self) -> None:
        status = self.query_one("#detail_status", Static)
        try:
            product = await asyncio.to_thread(
                self.services.products.get_product, self.product_id
            )
        except DashboardError as exc:
            logger.error(
                "Failed to load product %s: %s",
                self.product_id,
                exc,
                exc_info=True,
            )
            product = None
        if product is None:
            status.update("Failed to load product.")
            return
        status.update("")
        self.product = product
        self.gallery = Gallery(images=list(product.images))
        self.query_one("#detail_name", Static).update(
            Text(product.name, style="bold")
        )
        self.query_one("#detail_price", Static).update(
            format_price(product.price)
        )
        self.query_one("#detail_description", Static).update(
            product.description
        )
        self.render_gallery()

    def render_gallery(self) -> None:
        gallery = self.gallery
        self.query_one("#gallery_main", Static).update(
            gallery.main_url() or "No images"
        )
        self.query_one("#gallery_caption", Static).update(gallery.caption())
        thumbs = "\n".join(
            f"{'▶' if i == gallery.active_index else ' '} {url}"
            for i, url in enumerate(gallery.thumbnail_urls())
        )
        self.query_one("#gallery_thumbs", Static).update(
            thumbs if len(gallery.images) > 1 else ""
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add_btn":
            self.action_add_to_cart()
        elif event.button.id == "edit_btn":
            self.action_edit()
        elif event.button.id == "back_btn":
            self.action_back()

    def action_back(self) -> None:
        self.go_to_products()

    def action_previous_image(self) -> None:
        self.gallery.previous()
        self.render_gallery()

    def action_next_image(self) -> None:
        self.gallery.next()
        self.render_gallery()

    def action_open_image(self) -> None:
        url = self.gallery.large_url()
        if url:
            webbrowser.open(url)

    def action_add_to_cart(self) -> None:
        if self.product is not None:
            self.run_worker(_add_to_cart(self.services, self.product.id))

    def action_edit(self) -> None:
        if self.product is not None:
            form = EditProductForm(self.services.products, self.product.id)
            self.app.push_screen(ProductFormScreen(form))


# ── Product form (create / edit) ─────────────────────────


class ProductFormScreen(DashboardScreen):
    """Create or edit a product, including its image selection."""

    BINDINGS = [
        Binding("escape", "back", "Back to Products"),
        Binding("ctrl+s", "submit", "Save"),
    ]

    def __init__(self, form: ProductForm) -> None:
        super().__init__()
        self.form = form
        self.is_edit = isinstance(form, EditProductForm)
        self.image_ids: list[str] = []

    def compose(self) -> ComposeResult:
        heading = "Edit Product" if self.is_edit else "Add Product"
        submit_label = "Save Changes" if self.is_edit else "Create Product"
        yield Header()
        yield VerticalScroll(
            Static(heading, id="form_title"),
            Static("", id="form_status"),
            Input(placeholder="Enter product name", id="name_input"),
            Static("", id="name_error", classes="error"),
            Input(placeholder="Enter price", id="price_input"),
            Static("", id="price_error", classes="error"),
            TextArea(id="description_input"),
            Horizontal(
                Input(
                    placeholder="Image file path(s), comma-separated",
                    id="image_path_input",
                ),
                Button("Add images", id="add_images_btn"),
                id="image_picker",
            ),
            Static("", id="images_count"),
            Static("", id="images_error", classes="error"),
            DataTable(id="images_table", cursor_type="row"),
            Horizontal(
                Button("Remove image", id="remove_image_btn"),
                Button(submit_label, variant="primary", id="submit_btn"),
                Button("Back to Products", id="back_btn"),
                id="form_actions",
            ),
            id="form_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#images_table", DataTable)
        table.add_columns("Type", "Preview")
        self.render_images()
        if isinstance(self.form, EditProductForm):
            self.run_worker(self._load(self.form), exclusive=True)

    def on_unmount(self) -> None:
        """Release local previews however the screen is left."""
        self.form.close()

    async def _load(self, form: EditProductForm) -> None:
        status = self.query_one("#form_status", Static)
        status.update("Loading product...")
        try:
            await asyncio.to_thread(form.load)
        except DashboardError as exc:
            logger.error("Failed to load product for editing: %s", exc)
            status.update("Failed to load product. Press Esc to go back.")
            return
        status.update("")
        self.query_one("#name_input", Input).value = form.name
        self.query_one("#price_input", Input).value = form.price
        self.query_one("#description_input", TextArea).text = (
            form.description
        )
        self.render_images()

    def render_images(self) -> None:
        table = self.query_one("#images_table", DataTable)
        table.clear()
        self.image_ids = []
        for entry in self.form.images:
            kind = "new" if isinstance(entry, NewImage) else "existing"
            table.add_row(kind, entry.display_url)
            self.image_ids.append(entry.entry_id)
        label = "Total selected" if self.is_edit else "Selected"
        self.query_one("#images_count", Static).update(
            f"{label}: {len(self.form.images)} "
            f"(min {Settings.MIN_IMAGES}, max {Settings.MAX_IMAGES})"
        )
        self.render_errors()

    def render_errors(self) -> None:
        for field in ("name", "price", "images"):
            self.query_one(f"#{field}_error", Static).update(
                self.form.errors.get(field, "")
            )

    # ── Events ───────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "name_input":
            self.form.set_name(event.value)
        elif event.input.id == "price_input":
            self.form.set_price(event.value)
        else:
            return
        self.render_errors()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.form.set_description(event.text_area.text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "add_images_btn":
            self._add_images()
        elif button_id == "remove_image_btn":
            self._remove_selected_image()
        elif button_id == "submit_btn":
            self.action_submit()
        elif button_id == "back_btn":
            self.action_back()

    def _add_images(self) -> None:
        path_input = self.query_one("#image_path_input", Input)
        paths = [p.strip() for p in path_input.value.split(",") if p.strip()]
        if not paths:
            return
        try:
            added = self.form.add_images(paths)
        except OSError as exc:
            self.notify(f"Cannot read image: {exc}", severity="error")
            return
        path_input.value = ""
        if len(added) < len(paths):
            self.notify(
                f"Added {len(added)} of {len(paths)} images",
                severity="warning",
            )
        self.render_images()

    def _remove_selected_image(self) -> None:
        table = self.query_one("#images_table", DataTable)
        row = table.cursor_row
        if 0 <= row < len(self.image_ids):
            self.form.remove_image(self.image_ids[row])
            self.render_images()

    def action_back(self) -> None:
        self.go_to_products()

    def action_submit(self) -> None:
        if not self.form.validate():
            self.render_errors()
            return
        self.run_worker(self._submit(), exclusive=True)

    async def _submit(self) -> None:
        try:
            await asyncio.to_thread(self.form.submit)
        except FormValidationError:
            self.render_errors()
            return
        except DashboardError as exc:
            logger.error("Product save failed: %s", exc, exc_info=True)
            self.notify(f"Save failed: {exc}", severity="error")
            return
        self.notify(
            "Product updated" if self.is_edit else "Product created"
        )
        self.go_to_products()


# ── Cart ─────────────────────────────────────────────────


class CartScreen(DashboardScreen):
    """The signed-in user's cart with a quantity stepper."""

    BINDINGS = [
        Binding("escape", "back", "Continue Shopping"),
        Binding("plus,equals_sign", "increment", "+1"),
        Binding("minus", "decrement", "-1"),
        Binding("x,delete", "remove", "Remove"),
        Binding("k", "checkout", "Checkout (Demo)"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.rows: list[CartRow] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static("Your Cart", id="title"),
            Static("Loading cart...", id="cart_status"),
            DataTable(id="cart_table", zebra_stripes=True, cursor_type="row"),
            Static("", id="cart_total"),
            id="cart_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#cart_table", DataTable)
        table.add_columns("Product", "Price", "Qty", "Line total")

    def on_screen_resume(self) -> None:
        self.run_worker(self.load_cart(), exclusive=True, group="cart")

    async def load_cart(self) -> None:
        status = self.query_one("#cart_status", Static)
        try:
            cart = await asyncio.to_thread(self.services.cart.get_cart)
        except DashboardError as exc:
            logger.error("Failed to load cart: %s", exc, exc_info=True)
            status.update("Failed to load cart. Press Esc to go back.")
            return
        if cart is None:
            status.update("Sign in to see your cart.")
            return

        view = self.services.cart_view
        self.rows = view.rows(cart)
        table = self.query_one("#cart_table", DataTable)
        table.clear()
        for row in self.rows:
            if row.available:
                table.add_row(
                    row.label,
                    f"{format_price(row.unit_price)} each",
                    str(row.quantity),
                    format_price(row.line_total),
                )
            else:
                table.add_row(
                    Text(row.label, style="bold red"),
                    UNAVAILABLE_HINT,
                    str(row.quantity),
                    "—",
                )
        status.update(
            "Your cart is empty. Go add some products!" if not self.rows else ""
        )
        self.query_one("#cart_total", Static).update(
            f"Total: {format_price(view.total(cart))}"
        )

    def selected_row(self) -> CartRow | None:
        table = self.query_one("#cart_table", DataTable)
        index = table.cursor_row
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    def action_back(self) -> None:
        self.app.pop_screen()

    def action_increment(self) -> None:
        row = self.selected_row()
        if row is not None and row.available:
            self._mutate(self.services.cart_view.increment, row)

    def action_decrement(self) -> None:
        row = self.selected_row()
        if row is not None and row.available:
            self._mutate(self.services.cart_view.decrement, row)

    def action_remove(self) -> None:
        row = self.selected_row()
        if row is not None:
            self._mutate(self.services.cart_view.remove, row)

    def action_checkout(self) -> None:
        self.notify("Checkout is a demo only", severity="warning")

    def _mutate(self, operation: Any, row: CartRow) -> None:
        async def run() -> None:
            try:
                await asyncio.to_thread(operation, row.item)
            except DashboardError as exc:
                logger.error("Cart update failed: %s", exc, exc_info=True)
                self.notify(f"Cart update failed: {exc}", severity="error")
                return
            await self.load_cart()

        self.run_worker(run(), group="cart-writes")

"""Shopping cart aggregate: one cart per user, lines keyed by product, size and colour.

Each line remembers the price, discount and stock seen when the product was
added. Quantities are bounded by that stock; setting a quantity to zero or
below removes the line.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import CartCleared, CartItemAdded
from storefront.catalogue.product import discounted
from storefront.domain import storefront
from storefront.exceptions import InsufficientStock, NotFound


def _same(a, b):
    return (a or None) == (b or None)


@storefront.entity(part_of="ShoppingCart")
class CartLine:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    name = String(required=True, max_length=255)
    size = String(max_length=50)
    color = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    discount = Float(default=0.0)
    stock = Integer(default=0, min_value=0)
    added_at = DateTime()

    def matches(self, product_id, size=None, color=None):
        return str(self.product_id) == str(product_id) and _same(self.size, size) and _same(self.color, color)

    @property
    def unit_price(self):
        return discounted(self.price, self.discount)

    @property
    def line_total(self):
        return round(self.unit_price * self.quantity, 2)


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(required=True, unique=True)
    lines = HasMany(CartLine)
    selected_shipping_method_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def line_quantities_must_not_exceed_stock(self):
        for line in self.lines:
            if line.quantity > line.stock:
                raise ValidationError({"lines": [f"Quantity for {line.name} exceeds available stock"]})

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_line(self, product_id, size=None, color=None):
        return next((line for line in self.lines if line.matches(product_id, size, color)), None)

    def total(self):
        """Sum of discounted line totals."""
        return round(sum(line.line_total for line in self.lines), 2)

    @property
    def item_count(self):
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self):
        return not self.lines

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(
        self, product_id, name, price, stock, quantity=1, size=None, color=None, discount=0.0, variant_id=None
    ):
        """Add ``quantity`` of a product, merging into an existing line."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.find_line(product_id, size, color)
        current_quantity = existing.quantity if existing else 0
        if current_quantity + quantity > stock:
            raise InsufficientStock(available_stock=stock)

        now = datetime.now(UTC)
        if existing:
            existing.stock = stock
            existing.quantity = current_quantity + quantity
            existing.price = price
            existing.discount = discount or 0.0
        else:
            self.add_lines(
                CartLine(
                    product_id=product_id,
                    variant_id=variant_id,
                    name=name,
                    size=size,
                    color=color,
                    quantity=quantity,
                    price=price,
                    discount=discount or 0.0,
                    stock=stock,
                    added_at=now,
                )
            )

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                cart_id=self.id,
                user_id=self.user_id,
                product_id=product_id,
                size=size,
                color=color,
                quantity=quantity,
            )
        )

    def update_quantity(self, product_id, quantity, size=None, color=None):
        """Set a line's quantity. Zero or less removes the line."""
        line = self.find_line(product_id, size, color)
        if line is None:
            raise NotFound("Item not found in cart")

        if quantity <= 0:
            self.remove_lines(line)
        else:
            if quantity > line.stock:
                raise InsufficientStock(available_stock=line.stock)
            line.quantity = quantity

        self.updated_at = datetime.now(UTC)

    def remove_item(self, product_id, size=None, color=None):
        line = self.find_line(product_id, size, color)
        if line is None:
            raise NotFound("Item not found in cart")
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

    def select_shipping_method(self, shipping_method_id):
        self.selected_shipping_method_id = shipping_method_id
        self.updated_at = datetime.now(UTC)

    def clear(self):
        removed = len(self.lines)
        for line in list(self.lines):
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        if removed:
            self.raise_(CartCleared(cart_id=self.id, user_id=self.user_id, lines_removed=removed))


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_user(self, user_id) -> ShoppingCart | None:
        results = self._dao.query.filter(user_id=str(user_id)).all().items
        return results[0] if results else None

    def for_user_or_new(self, user_id) -> ShoppingCart:
        """The user's cart; a fresh, unsaved one when they never had a cart."""
        return self.for_user(user_id) or ShoppingCart.create(user_id)

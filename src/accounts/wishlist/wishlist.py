"""Wishlist aggregate: the products a user has marked as favourites."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier

from accounts.domain import accounts


@accounts.entity(part_of="Wishlist")
class WishlistItem:
    product_id: Identifier(required=True)
    added_at: DateTime(default=lambda: datetime.now(UTC))


@accounts.aggregate
class Wishlist:
    """One wishlist per user; a product is listed at most once.

    Uniqueness is an invariant of the aggregate and ``user_id`` is unique in
    storage, so racing adds end in a version or uniqueness conflict rather
    than a duplicate row.
    """

    user_id: Identifier(required=True, unique=True)
    items: HasMany(WishlistItem)

    @invariant.post
    def product_listed_at_most_once(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"product_id": ["This product is already in your wishlist"]})

    def item_for(self, product_id) -> WishlistItem | None:
        return next((item for item in self.items if str(item.product_id) == str(product_id)), None)

    def contains(self, product_id) -> bool:
        return self.item_for(product_id) is not None

    def add_product(self, product_id) -> WishlistItem:
        if self.contains(product_id):
            raise ValidationError({"product_id": ["This product is already in your wishlist"]})

        item = WishlistItem(product_id=product_id)
        self.add_items(item)
        return item

    def remove_product(self, product_id) -> None:
        item = self.item_for(product_id)
        if item is None:
            raise ObjectNotFoundError(f"Product {product_id} is not in the wishlist")
        self.remove_items(item)

    def toggle(self, product_id) -> bool:
        """Add the product if absent, remove it if present. Returns the new state."""
        if self.contains(product_id):
            self.remove_product(product_id)
            return False
        self.add_product(product_id)
        return True

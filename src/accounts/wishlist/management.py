"""Wishlist management: commands, handler, repository and the status query."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from accounts.domain import accounts
from accounts.wishlist.wishlist import Wishlist

logger = structlog.get_logger(__name__)


@accounts.repository(part_of=Wishlist)
class WishlistRepository:
    def for_user(self, user_id) -> Wishlist:
        """The user's wishlist, or a new empty one on first use."""
        wishlist = self.query.filter(user_id=user_id).first
        return wishlist if wishlist is not None else Wishlist(user_id=user_id)


@accounts.command(part_of="Wishlist")
class AddToWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@accounts.command(part_of="Wishlist")
class RemoveFromWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@accounts.command(part_of="Wishlist")
class ToggleWishlistItem:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@accounts.command_handler(part_of=Wishlist)
class ManageWishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.for_user(command.user_id)
        item = wishlist.add_product(command.product_id)
        repo.add(wishlist)
        return str(item.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.for_user(command.user_id)
        wishlist.remove_product(command.product_id)
        repo.add(wishlist)

    @handle(ToggleWishlistItem)
    def toggle_wishlist_item(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.for_user(command.user_id)
        is_favorited = wishlist.toggle(command.product_id)
        repo.add(wishlist)
        logger.info(
            "wishlist.toggled",
            user_id=command.user_id,
            product_id=command.product_id,
            is_favorited=is_favorited,
        )
        return is_favorited


def wishlist_status(user_id, product_id) -> dict:
    """Whether ``product_id`` is on the user's wishlist, and under which item."""
    wishlist = current_domain.repository_for(Wishlist).for_user(user_id)
    item = wishlist.item_for(product_id)
    return {"is_favorited": item is not None, "item_id": str(item.id) if item else None}

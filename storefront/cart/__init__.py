"""Shopping cart.

Resolves cart references into priced line items and manages stored carts.
"""

from storefront.cart.service import CartItemReference, CartLineItem, CartService

__all__ = [
    "CartItemReference",
    "CartLineItem",
    "CartService",
]

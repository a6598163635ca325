"""
API routers.
"""
from . import admin, cart, orders, payments, shop

routers = [
    orders.router,
    admin.router,
    shop.router,
    cart.router,
    payments.router,
]

__all__ = ["routers"]

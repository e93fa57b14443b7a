"""
SQLAlchemy models for Tablebook.
"""
# Staff
from tablebook.models.user import User
from tablebook.models.token_blacklist import TokenBlacklist

# Floor & bookings
from tablebook.models.table import DiningTable
from tablebook.models.reservation import Reservation

# Menu & orders
from tablebook.models.menu import MenuItem
from tablebook.models.order import Order, OrderItem

# Settings
from tablebook.models.settings import RestaurantSetting


__all__ = [
    # Staff
    "User",
    "TokenBlacklist",
    # Floor & bookings
    "DiningTable",
    "Reservation",
    # Menu & orders
    "MenuItem",
    "Order",
    "OrderItem",
    # Settings
    "RestaurantSetting",
]

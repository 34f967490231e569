# Database modules

from .carts import CartStore, build_line_key

__all__ = ["CartStore", "build_line_key"]

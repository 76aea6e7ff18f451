"""Storefront cart, checkout and payment verification."""

__version__ = "1.0.0"

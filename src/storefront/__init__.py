"""Storefront: e-commerce backend for a digital software shop."""

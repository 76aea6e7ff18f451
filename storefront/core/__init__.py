"""Core helpers shared across the storefront: config, errors, totals."""

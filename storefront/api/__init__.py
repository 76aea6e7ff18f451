"""HTTP layer: storefront pages, cart API, checkout and verification routes."""

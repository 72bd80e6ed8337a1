"""Device-side storefront client: local storage, API access and cart merging."""

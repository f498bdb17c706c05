"""Contact messages sent from the storefront."""

"""Web layer: routes, form parsing and template contexts."""

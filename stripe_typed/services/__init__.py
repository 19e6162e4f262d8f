"""Services Layer — resilience controller, operation catalogue, client facade."""

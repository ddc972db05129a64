"""Infrastructure package: persistence backends for person labels."""

"""Club portal: club profile editing plus a debounced static-site build queue."""

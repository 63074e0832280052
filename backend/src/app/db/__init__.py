"""Product persistence: table layout and repositories."""

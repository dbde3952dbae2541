"""Domain services backing the tracker API."""

"""City dashboard aggregation service."""

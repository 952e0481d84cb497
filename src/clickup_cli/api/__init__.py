"""ClickUp REST API client, records and filters."""

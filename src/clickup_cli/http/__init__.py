"""HTTP transport for the ClickUp REST API."""

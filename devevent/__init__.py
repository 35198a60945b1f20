"""DevEvent: event listing and booking API."""

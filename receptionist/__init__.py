"""Voice receptionist dashboard and call-event API."""

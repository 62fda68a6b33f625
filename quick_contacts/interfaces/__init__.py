"""Front ends for Quick Contacts."""

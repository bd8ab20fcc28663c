"""CLI command groups for the MariaDB backup plugin."""

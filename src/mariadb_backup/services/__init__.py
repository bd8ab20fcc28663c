"""Service layer for the MariaDB backup plugin."""

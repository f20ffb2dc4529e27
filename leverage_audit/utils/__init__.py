"""Shell-side helpers: logging setup and CRM lead capture."""

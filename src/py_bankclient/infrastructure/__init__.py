"""Infrastructure adapters: settings, logging, HTTP transport and token storage."""

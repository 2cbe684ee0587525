"""Core: configuration, domain, contracts and services (no CLI, no httpx)."""

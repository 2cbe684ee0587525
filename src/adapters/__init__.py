"""Adapters: concrete infrastructure (httpx, Management API, JSON output)."""

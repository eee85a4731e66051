"""Adapters connecting the domain to persistence and transport."""

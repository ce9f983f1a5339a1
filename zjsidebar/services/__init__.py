"""Sidebar services: alerts, collapse synchronization, broadcast catch-up."""

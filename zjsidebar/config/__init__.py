"""Configuration for zjsidebar."""

"""Rendering for the sidebar: fixed-width layout, row painting, preview host."""

"""
zjsidebar - terminal multiplexer status sidebar with tab alerts
"""

__version__ = "0.3.0"

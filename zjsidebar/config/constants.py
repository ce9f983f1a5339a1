"""
Centralized constants for zjsidebar.

Pipe message names, timer cadences and geometry used by the sidebar. Values
here are defaults; ``settings.load_sidebar_settings`` may override the
tunable ones from the user's config file.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

SIDEBAR_CONFIG_DIR = Path.home() / ".config" / "zjsidebar"
COLLAPSE_RECORD_FILENAME = "collapse_state.json"
SETTINGS_FILENAME = "sidebar_config.json"

# =============================================================================
# PIPE MESSAGE NAMES
# =============================================================================

PIPE_TAB_ALERT = "zj-status-sidebar:cli:tab_alert"
PIPE_NOTIFY = "zj-status-sidebar:cli:notify"
PIPE_TOGGLE = "zj-status-sidebar:cli:toggle"
PIPE_BROADCAST = "zj-status-sidebar:plugin:tab_alert:broadcast"

# =============================================================================
# TIMERS (seconds)
# =============================================================================

TIMER_ALERTS = "alerts"
TIMER_COLLAPSE_POLL = "collapse_poll"

ALERT_TICK_SECONDS = 1.0

# Collapse polling backs off from the floor to the ceiling while idle
POLL_FLOOR_SECONDS = 0.05
POLL_CEILING_SECONDS = 2.0
POLL_GROWTH_FACTOR = 2.0

# =============================================================================
# ALERTS
# =============================================================================

DEFAULT_FLASH_UNITS = 3  # on/off cycles before a notification settles

# =============================================================================
# GEOMETRY
# =============================================================================

HEADER_ROWS = 3  # blank, input mode, separator
EXPANDED_WIDTH = 24
COLLAPSED_WIDTH = 5
ELLIPSIS = "..."

# =============================================================================
# INPUT
# =============================================================================

DEFAULT_TOGGLE_KEY = "b"
DEFAULT_TOGGLE_MODE = "TAB"
DEFAULT_TAB_NAME_PREFIX = "Tab #"

# =============================================================================
# ENVIRONMENT
# =============================================================================

ENV_STATE_DIR = "ZJSIDEBAR_STATE_DIR"
ENV_SESSION_NAME = "ZELLIJ_SESSION_NAME"
MULTIPLEXER_BINARY = "zellij"

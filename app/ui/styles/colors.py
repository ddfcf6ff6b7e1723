"""Color palette constants for the dark theme."""

# Base theme colors
BACKGROUND = "#0F172A"
PANEL_BG = "#1E293B"
SURFACE = "#334155"
BORDER = "#475569"

# Accent colors
ACCENT = "#F59E0B"
ACCENT_HOVER = "#FBBF24"
ACCENT_PRESSED = "#D97706"

# Semantic colors
WARNING = "#F59E0B"
ERROR = "#EF4444"
SUCCESS = "#10B981"

# Text colors
TEXT_PRIMARY = "#F8FAFC"
TEXT_SECONDARY = "#B0BEC5"
TEXT_DISABLED = "#64748B"

# Efficiency bands [%] — share of provisioned driver capacity in use
EFFICIENCY_HIGH_PCT = 90.0
EFFICIENCY_LOW_PCT = 50.0

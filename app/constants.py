"""Application-wide constants.

Presets and initial field values mirror the options offered in the
calculator form; they are plain strings because the form stores raw text.
"""

APP_NAME = "LED Driver Calculator"
APP_VERSION = "0.1.0"
APP_ORGANIZATION = "LEDCalc"

# Window constraints
MIN_WINDOW_WIDTH = 760
MIN_WINDOW_HEIGHT = 640

# Database
DB_FILENAME = "led_calculator.db"

# History
HISTORY_SETTING_KEY = "ledCalculatorHistory"
MAX_HISTORY_ENTRIES = 20
HISTORY_SCHEMA_VERSION = "1.0"

# Converter display precision (decimal places before trailing-zero strip)
LENGTH_DISPLAY_DECIMALS = 6

# Power consumption presets [W/m]
CUSTOM_PRESET = "custom"
POWER_PRESETS = {
    "14.4": "14.4 W/m (Standard RGB)",
    "24": "24 W/m (High Density)",
    "36": "36 W/m (Ultra Bright)",
    "48": "48 W/m (Commercial Grade)",
    "60": "60 W/m (Professional)",
    CUSTOM_PRESET: "Custom",
}

# Driver wattage presets [W]
DRIVER_WATTAGE_PRESETS = {
    "30": "30W",
    "50": "50W",
    "75": "75W",
    "100": "100W",
    "150": "150W",
    "200": "200W",
    "300": "300W",
    "350": "350W",
    CUSTOM_PRESET: "Custom",
}

# Initial driver form state
DEFAULT_POWER_PER_METER = "14.4"
DEFAULT_SAFETY_MARGIN = "20"  # %
DEFAULT_DRIVER_WATTAGE = "100"
DEFAULT_VOLTAGE = "24V"

# Share
SHARE_BASE_URL = "https://wa.me/?text="

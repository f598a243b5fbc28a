"""
SmartCalc Configuration Settings
"""
import os

# Application Settings
APP_NAME = "SmartCalc"
VERSION = "1.0.0"
LOG_LEVEL = os.environ.get("SMARTCALC_LOG_LEVEL", "INFO")

# Display Settings (phone-shaped portrait window)
WINDOW_WIDTH = 390
WINDOW_HEIGHT = 780
DISPLAY_FONT = ("Helvetica", 56)
EXPRESSION_FONT = ("Helvetica", 18)
BUTTON_FONT = ("Helvetica", 20)
LABEL_FONT = ("Helvetica", 11)

# ── Palettes ───────────────────────────────────────────────────────────────────

# DARK palette – black phone face, orange operators
PHONE_DARK = {
    "bg":           "#000000",
    "bg_dark":      "#1C1C1E",
    "display_fg":   "#FFFFFF",
    "subtext":      "#8E8E93",
    "digit_bg":     "#333333",
    "digit_fg":     "#FFFFFF",
    "modifier_bg":  "#A5A5A5",
    "modifier_fg":  "#000000",
    "operator_bg":  "#FF9F0A",
    "operator_fg":  "#FFFFFF",
    "active_bg":    "#FFFFFF",
    "active_fg":    "#FF9F0A",
    "smart_bg":     "#4F46E5",
    "smart_fg":     "#FFFFFF",
    "explain_bg":   "#1E1B4B",
    "explain_fg":   "#C7D2FE",
    "entry_bg":     "#1C1C1E",
    "entry_fg":     "#FFFFFF",
    "danger":       "#E55A4E",
    "success":      "#30D158",
    "warning":      "#D4A020",
}

# LIGHT palette
PHONE_LIGHT = {
    "bg":           "#F2F2F7",
    "bg_dark":      "#E5E5EA",
    "display_fg":   "#1C1C1E",
    "subtext":      "#6E6E73",
    "digit_bg":     "#FFFFFF",
    "digit_fg":     "#1C1C1E",
    "modifier_bg":  "#D1D1D6",
    "modifier_fg":  "#1C1C1E",
    "operator_bg":  "#FF9F0A",
    "operator_fg":  "#FFFFFF",
    "active_bg":    "#1C1C1E",
    "active_fg":    "#FF9F0A",
    "smart_bg":     "#4F46E5",
    "smart_fg":     "#FFFFFF",
    "explain_bg":   "#E0E7FF",
    "explain_fg":   "#312E81",
    "entry_bg":     "#FFFFFF",
    "entry_fg":     "#1C1C1E",
    "danger":       "#B03A2E",
    "success":      "#2E8B57",
    "warning":      "#B07D1E",
}


def get_theme(dark: bool) -> dict:
    """Return the active colour palette."""
    return PHONE_DARK if dark else PHONE_LIGHT


# GUI preferences (theme only; calculation history is never written to disk)
SETTINGS_FILE = os.path.join(os.path.dirname(__file__), "settings.json")

# History Settings
MAX_HISTORY_ITEMS = 50

# Smart mode (Gemini) settings
SOLVER_MODEL = os.environ.get("SMARTCALC_SOLVER_MODEL", "gemini-3-pro-preview")
EXPLAIN_MODEL = os.environ.get("SMARTCALC_EXPLAIN_MODEL", "gemini-3-flash-preview")
SOLVER_SYSTEM_INSTRUCTION = (
    "You are a mathematical genius. Solve the user's word problem. "
    "Return the final numerical result and a brief step-by-step breakdown."
)
EXPLAIN_PROMPT = (
    "Explain the calculation step-by-step for: {expression} = {result}. "
    "Keep it concise and suitable for a mobile app screen."
)
SOLVER_TEMPERATURE = 0.7
SOLVER_TOP_P = 0.95
EXPLANATION_FALLBACK = "Could not generate explanation at this time."
SOLVE_FAILED_MESSAGE = "Failed to solve word problem. Check your API key."

# Polling interval for the GUI while a solve runs on the worker thread
SOLVE_POLL_MS = 100


def get_api_key():
    """Return the Gemini API key from the environment, or None if unset."""
    return os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or None


# Web Portal settings
WEB_HOST = os.environ.get("SMARTCALC_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("SMARTCALC_PORT", 8888))
START_WEB_PORTAL = os.environ.get("SMARTCALC_WEB_PORTAL", "0") == "1"

ELEMENT_STYLE = {
    "dark": {
        "stroke": "#e2e8f0",        # light slate
        "text": "#f8fafc",
        "canvas": "#1e293b",
        "export_background": "#1e293b",
        "mermaid_theme": "dark",
    },
    "light": {
        "stroke": "#1e293b",
        "text": "#0f172a",
        "canvas": "#f1f5f9",
        "export_background": "#ffffff",
        "mermaid_theme": "default",
    },
}

# Shared by every generated element
BASE_ELEMENT = {
    "roughness": 1,
    "stroke_width": 1,
    "fill_style": "solid",
    "background_color": "transparent",
}

# Stroke values the dark-theme colour patch rewrites
BLACK_STROKES = {"", "#000000", "black"}

MERMAID_THEMES = ("dark", "default", "forest", "neutral")

FIT_ZOOM_FACTOR = 0.8


def theme_key(dark_mode: bool) -> str:
    return "dark" if dark_mode else "light"


def style_for(dark_mode: bool) -> dict:
    return ELEMENT_STYLE[theme_key(dark_mode)]

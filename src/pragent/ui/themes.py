"""Theme definitions for the chat surfaces.

To add a new theme, define it here and register it in the app's on_mount.
"""

from textual.theme import Theme

NEWSROOM_DARK = Theme(
    name="newsroom-dark",
    primary="#7aa2f7",      # Blue - user messages, focus
    secondary="#bb9af7",    # Violet - assistant messages
    accent="#e0af68",       # Amber - suggestions and badges
    foreground="#c0caf5",
    background="#16161e",
    success="#9ece6a",
    warning="#ff9e64",
    error="#f7768e",
    surface="#1a1b26",
    panel="#1f2335",
    dark=True,
    variables={
        "border": "#3b4261",
        "border-blurred": "#292e42",
        "scrollbar": "#292e42",
        "scrollbar-hover": "#3b4261",
        "scrollbar-active": "#7aa2f7",
        "footer-key-foreground": "#e0af68",
        "text-muted": "#565f89",
    },
)

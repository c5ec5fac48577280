"""UI configuration constants.

Centralizes magic numbers and copy for the chat surfaces.
"""

# Quick actions offered before the first message
DEFAULT_CONTEXTUAL_PROMPTS = [
    "Generate a PR pitch for our latest product launch",
    "Analyze the performance of recent email campaigns",
    "Create a journalist outreach strategy for tech media",
    "Draft a press release template for partnerships",
]

# The docked widget only has room for a few quick actions
WIDGET_MAX_QUICK_PROMPTS = 3

# Reply follow-ups shown in the docked widget
WIDGET_MAX_SUGGESTIONS = 3
WIDGET_MAX_NEXT_STEPS = 2

# Words of a prompt shown on its button before "..."
PROMPT_PREVIEW_WORDS = 4

# Unread badge caps at this value and shows "99+"
UNREAD_BADGE_MAX = 99

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

# Message header timestamp
MESSAGE_TIME_FORMAT = "%H:%M"

WELCOME_TEXT = (
    "Hi! I'm your PR assistant. I can draft pitches, plan journalist outreach "
    "and review campaign performance. Ask me anything or pick a quick action."
)

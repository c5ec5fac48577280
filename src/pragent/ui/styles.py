"""CSS styles for the chat surfaces.

Hides layout and styling decisions from the application logic.
PAGE_CSS lays out the full-page assistant; WIDGET_CSS styles the docked
widget and is shared by any app that hosts it.
"""

SHARED_CSS = """
/* chat history */
ChatHistoryWidget {
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    scrollbar-gutter: stable;
    padding: 0 1;

    &:focus-within {
        border: round $primary;
    }
}

ChatPane {
    height: 1fr;
}

#chat-history {
    height: 1fr;
}

.welcome {
    color: $text-muted;
    margin: 1 0;
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;

    &.user-message {
        border-left: thick $primary;
    }

    &.assistant-message {
        border-left: thick $secondary;
    }

    &.error-message {
        border-left: thick $error;
    }
}

.message-header {
    color: $text-muted;
    text-style: bold;
}

.message-content {
    height: auto;
    margin: 0;
}

.message-actions {
    color: $success;
}

#thinking {
    color: $warning;
    text-style: italic;
    height: 1;
    display: none;

    &.visible {
        display: block;
    }
}

/* suggestions / quick prompts */
ActionList {
    height: auto;
    max-height: 12;
    padding: 0 1;
    border-title-color: $accent;

    & > Button {
        width: 100%;
        height: 1;
        min-width: 0;
        border: none;
        margin: 0;
        background: transparent;
        color: $accent;
        text-align: left;
        content-align: left middle;

        &:hover {
            background: $accent 15%;
        }
    }

    &.empty {
        display: none;
    }
}

/* chat input bar */
ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }

    &.busy {
        border: round $warning;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 3;
    margin: 0 1;
}
"""

PAGE_CSS = SHARED_CSS + """
/* full-page layout */
Screen {
    layout: horizontal;
    background: $background;
}

#sidebar {
    width: 36;
    height: 100%;
    background: $surface;
    border-right: solid $border;
    padding: 1;
}

#session-info {
    height: auto;
    color: $text-muted;
    margin-bottom: 1;
}

#main-panel {
    width: 1fr;
    height: 100%;
}

#log-panel {
    height: 10;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    padding: 0 1;
    display: none;

    &.visible {
        display: block;
    }
}
"""

WIDGET_CSS = SHARED_CSS + """
#dashboard {
    padding: 1 2;
    color: $text-muted;
}

/* docked assistant widget */
AssistantWidget {
    dock: right;
    width: 52;
    height: 100%;
    background: $surface;
    border-left: tall $primary;

    &.closed {
        width: 24;
        height: 3;
        border-left: none;
        background: transparent;
    }

    &.minimized {
        height: 3;
    }
}

#widget-header {
    height: 3;
    background: $primary 30%;
    padding: 0 1;
    align: left middle;
}

#widget-title {
    width: 1fr;
    text-style: bold;
}

#unread-badge {
    width: auto;
    color: $error;
    text-style: bold;
    margin-right: 1;
}

#widget-header > Button {
    min-width: 5;
    width: 5;
    height: 1;
    border: none;
    margin: 0 0 0 1;
}

#launcher {
    width: 100%;
}

#widget-body {
    height: 1fr;
}
"""

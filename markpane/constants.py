"""Constants and configuration defaults for the markpane editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Text layout
    TAB_WIDTH = 4  # Columns per tab stop
    MAX_LINE_LENGTH = 1000  # Longest physical line kept on load
    SEPARATOR_WIDTH = 1  # Column between the edit and preview halves in split layout
    FILLER = "~"  # Marker drawn on rows past the end of the document

    # Status line
    STATUS_MESSAGE_TIMEOUT = 5.0  # Lifetime of a transient status message (seconds)
    STATUS_FILENAME_WIDTH = 20  # Characters of the file name shown in the status bar
    HELP_MESSAGE = (
        "HELP: Ctrl-S = Save | Ctrl-O = Open | Ctrl-F = Find | "
        "Ctrl-P = Layout | Ctrl-] = Match Bracket | Ctrl-Q = Quit"
    )

    # Quit guard
    QUIT_CONFIRMATIONS = 1  # Extra quit presses required with unsaved changes

    # File operations
    ENCODING = "utf-8"
    ENCODING_ERRORS = "surrogateescape"  # Keep undecodable bytes intact

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Prompts
    SAVE_AS_PROMPT = "Save as: {} (ESC to cancel)"
    OPEN_PROMPT = "Open file: {} (ESC to cancel)"
    SEARCH_PROMPT = "Search: {} (ESC = Cancel | Arrows = Navigate | Enter = Confirm)"

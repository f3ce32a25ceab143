"""spocli command-line interface."""

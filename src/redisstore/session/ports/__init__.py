"""Session store ports."""

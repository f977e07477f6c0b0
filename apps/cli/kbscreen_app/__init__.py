"""kbscreen command-line application."""

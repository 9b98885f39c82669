"""Qt widgets for the networking report."""

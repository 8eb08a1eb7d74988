"""Command implementations behind the ``stackforge`` CLI."""

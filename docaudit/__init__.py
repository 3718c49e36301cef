"""docaudit - hygiene checks for agent instruction files."""

__version__ = "0.1.0"

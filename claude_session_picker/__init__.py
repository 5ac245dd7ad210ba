"""Interactive picker for resuming previous Claude Code sessions."""

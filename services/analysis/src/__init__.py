"""Analysis Service: live/baseline merge, staged analysis and AI recommendation."""

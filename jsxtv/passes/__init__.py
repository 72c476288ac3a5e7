"""Tree rewriting passes applied to a configured component, in pipeline order."""

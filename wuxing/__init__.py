"""Five-element (Wuxing) profile calculator."""

"""Feature modules: grading, disputes, achievements, stats."""

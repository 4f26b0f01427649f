"""Domain model, rule thresholds and the program validator."""

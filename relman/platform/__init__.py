"""Operating-system boundaries: subprocesses and file writes."""

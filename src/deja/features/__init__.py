"""Feature slices: key scope, entry store, command execution."""

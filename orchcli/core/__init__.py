"""Command-independent logic: response handling, flag parsing, input checks."""

"""Core domain utilities: exceptions and field encryption."""

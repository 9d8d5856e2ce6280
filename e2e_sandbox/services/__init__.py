"""Service layer for the sandbox harness."""

"""Sample report plugin used by the test suite."""

"""Unit tests for the kv_mock package."""

"""Test fixtures package for swiftkit tests."""

"""Diff pipeline stages and repository document tasks."""

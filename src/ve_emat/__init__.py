"""Scenario-input resolution for exploratory modeling with files-based models."""

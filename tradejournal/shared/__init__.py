"""Shared base models and exceptions."""

"""Pydantic data models for Draftdesk."""

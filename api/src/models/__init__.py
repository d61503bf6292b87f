"""Data models for the FastAPI service.

This package contains Pydantic models for responses and helpers that turn
MongoDB documents into JSON-compatible values.
"""

"""Shared API payloads and HTTP helpers for tests."""

"""Core configuration, error types and session identity helpers."""

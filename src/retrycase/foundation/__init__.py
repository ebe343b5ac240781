"""Foundation - error types, configuration and testing helpers."""

"""Common code for messaging models."""

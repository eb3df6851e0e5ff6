"""Attribute name canonicalisation."""


def canon(raw_attr_name: str) -> str:
    """Canonical attribute name: spaces removed, lower case; falsy passes through."""
    return raw_attr_name.replace(" ", "").lower() if raw_attr_name else raw_attr_name

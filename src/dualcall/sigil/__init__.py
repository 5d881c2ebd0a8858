"""
Sigil - Funding key management.
"""

"""
Core cryptography: request signing and HPKE wallet export.
"""

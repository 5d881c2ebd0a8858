"""
Forge - Solidity source generation and compilation.
"""

"""
Theurgy - Command implementations for dualcall.

- run: Deploy the Sample contract, emit an event, and call it back
"""

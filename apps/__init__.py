"""
Apps package - user-facing applications built on the shared libs.

This package contains:
- dex_console: DEX trading console order input (session wiring, gateway client)
"""

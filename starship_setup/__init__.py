"""Starship shell setup (Python-first, state-driven).

Core design goals:
- Idempotent config merging (re-running changes nothing)
- Backup before write, atomic replace on write
- Resumable steps with a persisted state file
- Centralized logging
"""

__all__ = []

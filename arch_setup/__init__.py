"""Arch Linux post-installation setup (step-driven, resumable).

Core design goals:
- Ordered, named steps; each one fatal or advisory
- A single resume marker persisted after every step
- External tools invoked through one logged command runner
- Interactive input behind an injectable prompt port
"""

__all__ = []

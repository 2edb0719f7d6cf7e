"""authcore - credential and session lifecycle service.

Issues, validates, rotates and revokes bearer credentials for authenticated
sessions, and runs the out-of-band password reset flow.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

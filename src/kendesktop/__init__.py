"""Ken Desktop - local services for the Ken desktop assistant.

Provides per-profile OAuth token storage on top of the OS keychain and
per-thread workspace directories under ~/Executive Assistant/Ken. The desktop
host invokes these as commands; all UI state lives in the host.

Package entry point. Exports the version string only; functional modules are
imported lazily by main.py to keep startup fast.
"""

__version__ = "0.1.0"

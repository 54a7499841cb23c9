"""AuthGate: session gateway in front of a hosted identity provider"""

__version__ = "0.1.0"

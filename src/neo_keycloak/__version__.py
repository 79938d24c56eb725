"""Version information for neo-keycloak."""

__version__ = "0.1.0"

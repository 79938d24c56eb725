"""Feature modules for neo-keycloak."""

"""Core building blocks shared by neo-keycloak features."""

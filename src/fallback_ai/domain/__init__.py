"""Domain layer — provider enumerations and the exception hierarchy."""

"""Service layer: business logic between commands and repositories."""

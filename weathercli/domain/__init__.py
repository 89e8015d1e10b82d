"""Domain Layer: value objects, errors and the ports the rest of the app depends on."""

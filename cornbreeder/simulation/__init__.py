"""Configuration, the breeding-program loop and its collaborators."""

"""Database metadata: the declarative Base every model and migration shares."""

"""Core registry: config store, db item model and the registry facade."""

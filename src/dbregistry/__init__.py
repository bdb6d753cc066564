"""
dbregistry - Registry of analysis databases for local and remote queries.

This package keeps a user's registry of analysis-database references in a
single JSON document. Local databases live on disk; remote repositories are
addressed by owner/repository name. Both can be grouped into named lists,
one item can be marked as selected, and container nodes can be marked as
expanded so a tree view keeps its shape across sessions.

Package Structure:
- core/config/: document models, schema validation, persistence and the
  watched config store
- core/items/: the derived db item tree, selection and expansion handling,
  and the pure document updates used by every mutation
- core/manager.py: the registry facade used by front-ends
- cli/: command-line interface
"""

__version__ = "0.3.0"

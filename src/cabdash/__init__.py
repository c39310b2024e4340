"""Live taxi ride dashboard service."""

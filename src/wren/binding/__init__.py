"""Binding — handler descriptors, the coercion table, and the binder."""

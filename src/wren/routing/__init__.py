"""Routing — template matching and the route table.

Routes are registered during setup and frozen when the app compiles.
"""

"""Example modules built on the scaffold."""

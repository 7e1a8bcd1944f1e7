"""HTTP surface for the fixture generator."""

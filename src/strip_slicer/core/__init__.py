"""Core data models shared by every slicer stage."""

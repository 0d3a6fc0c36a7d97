"""Models, configuration and exceptions shared by every stage."""

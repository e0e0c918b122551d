"""Route modules for the misogi web interface."""

"""misogi: track daily push-ups, squats and pull-ups toward an annual target."""

__version__ = "0.1.0"

"""carsim: synthetic real-time GPS feed for a simulated car fleet."""

__version__ = "0.1.0"

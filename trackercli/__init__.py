"""trackercli: rate-limited, cached client for Gazelle tracker APIs."""

__version__ = "0.1.0"

"""courier: delivers AI chat responses to Discord within message limits."""

__version__ = "1.0.0"

"""confdeploy — dependency-ordered deployment of monitoring configuration."""

__version__ = "0.1.0"

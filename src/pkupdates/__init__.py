"""pkupdates - Orchestration of package-manager update checks and installs."""

__version__ = "0.1.0"

"""repokit: result-typed generic repositories over async entity stores."""

__version__ = "0.1.0"

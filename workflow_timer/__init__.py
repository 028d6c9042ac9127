"""Compare pull-request job timings against the trunk branch and report them on the PR."""

__version__ = "0.1.0"

"""
Application Layer for the exercise media resolver.

This package contains:
- ports/: Abstract interfaces for remote catalogs, snapshot storage and the
  optional advanced matcher (what the resolver needs)
- use_cases/: Workflows built on the resolver (batch preloading)
"""

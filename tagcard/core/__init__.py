"""
Core utilities shared across the TagCard API.

This package hosts:
- configuration helpers (env vars, paths)
- cross-cutting services such as logging, the SMTP mailer,
  rate limit helpers and URL builders.

Services and routers depend on these primitives instead of reading the
environment or configuring sinks themselves.
"""

"""
High-level use cases for the TagCard API.

Each service module orchestrates repositories/adapters for one step of the
public profile pipeline (resolve, record the view, build artifacts, share).
Routers call these services instead of querying the database directly.
"""

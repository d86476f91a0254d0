"""Recipe search REST API package.

Sub-modules expose FastAPI routers:
- search: recipe search plus the cuisine / dietary tag facet lists
"""

# @TASK S3-T3.1 - API package initialization

"""Legal document search REST API package.

Sub-modules expose FastAPI routers for each domain:
- search: document search (paginated and simple)
"""

# Schemas package init
"""
Fauna API: Pydantic Schemas Package
=====================================

Request, response and query-string models for the three resources.
"""

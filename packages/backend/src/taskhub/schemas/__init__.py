"""Pydantic request/response schemas.

Wire format is camelCase (firstName, tenantId, assignedTo, ...); Python
attributes stay snake_case. CamelModel does the translation.
"""

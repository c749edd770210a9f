"""
Pydantic schema definitions for API payloads.

Transaction records and the monthly aggregation results each define
their own Pydantic models.  Schemas are separated from database rows
to decouple API representation from persistence.
"""

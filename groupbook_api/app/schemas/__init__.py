"""
Pydantic schema definitions for API payloads.

Each domain (accounts, events, guests) defines its own request models,
read projections and response envelopes.  Schemas are separated from
the SQL in ``services`` to decouple API representation from
persistence.
"""

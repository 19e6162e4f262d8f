"""Wire Schemas — pydantic models for Stripe resources and request inputs.

Invariants:
    - Every model derives from core.codec.WireModel (wire naming, frozen values)
    - Polymorphic fields are declared through core.codec.variant()
"""

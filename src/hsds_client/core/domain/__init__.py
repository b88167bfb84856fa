"""Wire models and type inference.

Why:
- Pure, strict data structures (Pydantic v2) describing HSDS entities.
- No HTTP, no CLI: only concepts of the HSDS data model.
"""

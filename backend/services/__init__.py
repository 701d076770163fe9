"""
services — framework-free business logic.

  storage             — document-store gateway (mongo | memory)
  auth_service        — registration, login, JWT session tokens
  classification      — image bytes → label / confidence / explanation
  prediction_service  — prediction persistence + histories
  curriculum          — category → character quota table
  progress            — per-category completion aggregation
"""

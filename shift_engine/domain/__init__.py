"""
Domain Layer

Business logic of the shift scheduling engine, independent of transport and
persistence.

Components:
- scheduling/: shifts, compliance rules, conflict detection, statistics,
  shift operations and bulk template workflow
- shared/: base value object and error hierarchy
"""

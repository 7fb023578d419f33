"""Services Layer — generation client, workspace store, and session controller.

Invariants:
    - Services orchestrate IO around pure core functions
    - The session controller is the only writer of Session and the stored snapshot

Design Decisions:
    - One file per collaborator for locality (ADR: no god objects)
"""

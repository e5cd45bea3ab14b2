"""Services Layer - async orchestration of the user query pipeline.

Invariants:
    - Services await collaborators through core/repository_protocols.py types only
    - Every public entry point normalizes errors before they leave the layer
"""

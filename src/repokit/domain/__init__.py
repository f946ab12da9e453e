"""Domain layer: entity contract, ids, paging, and error codes.

Standard library only. Nothing here imports from the other layers.
"""

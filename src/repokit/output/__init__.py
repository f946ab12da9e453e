"""Output layer: renders OperationResult for humans or machines."""

"""Domain Layer: models, value objects, errors and ports.

Has no dependencies on the infrastructure or core layers.
"""

"""Tracker API access: endpoint resolution and request execution.

Bounded Context: Tracker API
"""

"""Policy: which settings sections and properties are safe to process.

Security deny-list, per-section unreliable properties, and the default
sections used to seed a new settings file.
"""

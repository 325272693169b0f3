"""
authguard - guarded authentication use cases.

Every operation validates its input, resolves the acting user, calls the
account store and writes exactly one audit event, whether it succeeds or
fails. Failures surface as a closed error taxonomy.
"""

__version__ = "1.0.0"

"""products/ -- Product records and their ownership rules.

Layer rule: products/ imports only core/, stdlib and third-party libraries.
"""

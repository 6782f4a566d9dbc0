"""core/ -- Kernel: configuration, error taxonomy, validation rules, engine setup.

Layer rule: core/ imports nothing from the other packages.
"""

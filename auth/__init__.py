"""auth/ -- Authentication and authorization package for ProductDesk.

Layer rule: auth/ imports only core/, stdlib and third-party libraries.
It does NOT import from api/, products/, or client/.
api/ imports from auth/, not the other way around.
"""

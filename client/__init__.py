"""client/ -- HTTP client and session storage used by the command-line tool.

Layer rule: client/ must not import auth/, products/ stores or api/ -- it
talks to the server over HTTP only. Pure rules from core.validators are fine.
"""

"""Workshop time tracking package.

Organized by feature modules (presence, activity, productivity, ...) with a
thin Flask controller layer over a stateless engine and repository Protocols.
"""

"""
Request bodies for endpoints whose target id travels in the URL path.

Create endpoints accept the command object itself; these models carry the
remaining fields of commands addressed to an existing resource.
"""

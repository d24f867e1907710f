"""
Builtin functions. Every module here is imported by registry.discover();
functions tagged with @builtin become entries of the FunctionTable.
"""

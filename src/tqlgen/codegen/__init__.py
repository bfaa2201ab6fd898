"""Code generation for tqlgen.

Builders turn a parsed schema into sorted view models; ``render`` turns view
models into Python source through Jinja2 templates.
"""

"""
layerbind - layered bindings composition

Composes named layers of configuration bindings from module and confdir
sources, checks category precedence across contributions, and hands back a
single ordered layer stack.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]

"""Static analysis of bindings, constants and dynamic origins."""

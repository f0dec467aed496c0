"""Wrapper, extractor and legacy cleaner engines."""

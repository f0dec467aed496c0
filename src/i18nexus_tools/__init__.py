"""
i18nexus-tools - codemods that wrap hardcoded strings in translation calls
and extract translation keys into locale files for React / Next.js projects.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]

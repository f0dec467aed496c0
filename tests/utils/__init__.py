"""
Test utilities package for i18nexus-tools tests.

## Available Modules

### test_helpers.py
- `write_source()`: Write a file of a sample project
- `parse_snippet()`: Parse a source snippet as TSX (or by file name)
- `find_nodes()` / `find_identifier()`: Locate syntax nodes in a parsed snippet
- `wrap_code()`: Run the wrapper on one source text
- `create_temp_config_file()`: Context manager for a temporary i18nexus.config.json
"""

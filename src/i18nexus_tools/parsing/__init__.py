"""Source parsing and text editing over tree-sitter syntax trees."""

"""Text passes. Importing this package registers each of them by name."""

from importlib import import_module

PASS_MODULES = (
    "assemble_pages",
    "normalize_whitespace",
    "join_letter_runs",
    "filter_repeated_lines",
    "repair_hyphenation",
)

for _module in PASS_MODULES:
    import_module(f"{__name__}.{_module}")

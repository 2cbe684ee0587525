"""CLI layer (Typer + Rich).

Outermost layer: parses arguments, prompts, renders and maps errors to exit
codes. Nothing under `core` or `adapters` imports from here.
"""

"""Core package for the mineral catalogue report system.

Sub-packages expose the configuration models, the folder-backed mineral
catalogue and the report generation pipeline.
"""

__all__: list[str] = []

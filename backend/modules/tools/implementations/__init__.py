"""
Tool implementations organized by data source.

Each module contains the actual fetch logic for tools,
while definitions.py only contains the @tool decorators and passthroughs.
"""

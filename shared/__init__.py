"""
P-Tool Analyst Shared Package

Code shared between services:
- ai_clients: Generative model clients
- prompts: YAML prompt loading and formatting
- utils: Logging

Architecture rule: shared code carries no service business logic.
Prompts, schemas and domain models live in the owning service.
"""

__version__ = "0.1.0"

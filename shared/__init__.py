"""Shared utilities for TeamSync applications."""

# Contracts are imported from the shared.contracts submodule
# Example: from shared.contracts.dto import ProjectDTO, TaskDTO

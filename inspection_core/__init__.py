"""
Inspection Core root package.

This package contains the FastAPI app entry point (main.py), status API routes,
domain models, infrastructure collaborators (files, images, controller writes,
external quality system) and the tag-driven processing engines.
"""

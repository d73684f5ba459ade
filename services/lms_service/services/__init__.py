"""LMS workflows: entity store, dashboards, library, modules, enrollment, users."""

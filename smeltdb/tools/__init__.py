"""
Developer tools for SmeltDB.

- cli: ``smeltdb`` command (demo run, effective settings)
"""

"""Dockfleet: управление контейнерами на нескольких Docker-эндпоинтах."""

__version__ = "0.1.0"

"""CyberHunter freelance collaboration API.

Modules live under ``domain``, ``application``, ``infrastructure`` and
``interfaces``; ``main.create_app`` assembles the FastAPI application.
"""

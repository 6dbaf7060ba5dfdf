"""
Helpers shared by the test modules
"""

import asyncio


def run(coro):
    """Drive a coroutine to completion from a synchronous test"""
    return asyncio.run(coro)


def make_event_payload(**overrides):
    payload = {
        "title": "PyCon Berlin 2026",
        "description": "Three days of talks about Python.",
        "overview": "The community conference for Python developers.",
        "image": "/images/pycon.png",
        "venue": "Berlin Congress Center",
        "location": "Berlin, Germany",
        "date": "2026-04-14",
        "time": "9:00 AM CET",
        "mode": "hybrid",
        "audience": "Developers",
        "agenda": ["Keynote", "Talks", "Sprints"],
        "organizer": "Python Software Verband",
        "tags": ["python", "conference"],
    }
    payload.update(overrides)
    return payload
